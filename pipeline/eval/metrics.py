"""Evaluation metrics for invoice field extraction.

Computes precision, recall, and F1 scores for extracted invoice fields.
Based on standard information extraction evaluation methodologies.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from invoicechaser.extraction.schema import ExtractionResult

EVALUATED_FIELDS = (
    "vendor",
    "invoice_number",
    "due_date",
    "amount",
    "currency",
    "payment_terms",
)

# Amounts are compared as Decimal; floats and ints are accepted for direct calls
FieldValue = str | int | float | Decimal | None


@dataclass
class FieldMetrics:
    """Metrics for a single field."""

    precision: float
    recall: float
    f1: float
    support: int  # Number of samples


@dataclass
class EvaluationReport:
    """Complete evaluation report."""

    field_metrics: dict[str, FieldMetrics]
    macro_f1: float
    total_samples: int


def calculate_field_match(expected: FieldValue, predicted: FieldValue) -> bool:
    """Check if extracted field matches expected value.

    Args:
        expected: Ground truth value
        predicted: Extracted value

    Returns:
        True if values match (with tolerance for numeric fields)
    """
    if expected is None or predicted is None:
        return expected is None and predicted is None

    # Numeric comparison (with small tolerance for floating point)
    if not isinstance(expected, str) and not isinstance(predicted, str):
        return abs(float(expected) - float(predicted)) < 0.01

    # Case-insensitive, whitespace-normalized; a number never equals free text
    if isinstance(expected, str) and isinstance(predicted, str):
        return " ".join(expected.lower().split()) == " ".join(predicted.lower().split())
    return False


def _field_value(result: ExtractionResult, field: str) -> FieldValue:
    """Read a field; amounts compare numerically so '2450' matches '2,450.00'."""
    value: str | None = getattr(result, field)
    if field != "amount" or value is None:
        return value
    try:
        return Decimal(value.replace(",", ""))
    except InvalidOperation:
        return value


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator else 0.0


def _score_field(
    field: str, expected: list[ExtractionResult], predicted: list[ExtractionResult]
) -> FieldMetrics:
    """Precision/recall/F1 of one field; samples missing on both sides are ignored."""
    true_positives = false_positives = false_negatives = 0

    for exp, pred in zip(expected, predicted, strict=True):
        exp_value = _field_value(exp, field)
        pred_value = _field_value(pred, field)

        if exp_value is None and pred_value is None:
            continue
        if exp_value is None:
            false_positives += 1
        elif pred_value is None:
            false_negatives += 1
        elif calculate_field_match(exp_value, pred_value):
            true_positives += 1
        else:
            # A wrong value is both a bad prediction and a missed one
            false_positives += 1
            false_negatives += 1

    precision = _ratio(true_positives, true_positives + false_positives)
    recall = _ratio(true_positives, true_positives + false_negatives)
    f1 = 2 * (precision * recall) / (precision + recall) if (precision + recall) > 0 else 0.0

    return FieldMetrics(precision=precision, recall=recall, f1=f1, support=len(expected))


def evaluate_extraction(
    expected: list[ExtractionResult], predicted: list[ExtractionResult]
) -> EvaluationReport:
    """Evaluate the regex extractors against ground truth.

    Args:
        expected: Gold extraction results
        predicted: Extractor output, aligned with ``expected``

    Returns:
        Evaluation report with per-field and macro F1 scores

    Raises:
        ValueError: If the lists differ in length
    """
    if len(expected) != len(predicted):
        raise ValueError("Expected and predicted lists must have same length")

    field_metrics = {
        field: _score_field(field, expected, predicted) for field in EVALUATED_FIELDS
    }
    macro_f1 = sum(m.f1 for m in field_metrics.values()) / len(field_metrics)

    return EvaluationReport(
        field_metrics=field_metrics,
        macro_f1=macro_f1,
        total_samples=len(expected),
    )
