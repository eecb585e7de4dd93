"""Data-quality warnings for fields the extractors could not find."""

from invoicechaser.extraction.schema import ExtractionResult

# Checked in this order; vendor is deliberately absent.
RED_FLAG_MESSAGES: tuple[tuple[str, str], ...] = (
    ("invoice_number", "Invoice number not detected."),
    ("amount", "Invoice amount not detected."),
    ("due_date", "Due date not detected."),
    ("payment_terms", "Payment terms not detected."),
)


def evaluate_red_flags(extraction: ExtractionResult) -> list[str]:
    """Return one warning per missing field, in fixed order."""
    return [
        message for field, message in RED_FLAG_MESSAGES if getattr(extraction, field) is None
    ]


def missing_fields(extraction: ExtractionResult) -> list[str]:
    """Return the names of the flagged fields, in the same order as the warnings."""
    return [field for field, _ in RED_FLAG_MESSAGES if getattr(extraction, field) is None]
