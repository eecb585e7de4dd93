"""Escalation schedule for unpaid invoices."""

from invoicechaser.extraction.schema import ExtractionResult

ESCALATION_LADDER: tuple[str, ...] = (
    "Send the friendly email today if you have an ongoing relationship.",
    "If no response within 2 business days, send the neutral follow-up.",
    "If still unpaid after 5 business days, send the firm email and request a payment date.",
    "If overdue continues, consider pausing service and escalating per contract terms.",
)


def plan_next_steps(
    extraction: ExtractionResult | None = None, days_overdue: int | None = None
) -> list[str]:
    """Return the ordered escalation steps.

    The ladder is currently the same for every invoice; the arguments are
    accepted so per-case tailoring can be added without changing callers.
    """
    return list(ESCALATION_LADDER)
