"""Evaluation harness for the heuristic invoice extractors.

Runs the field extractors over a labeled dataset and computes metrics.
"""

import json
from pathlib import Path
from typing import Any

from invoicechaser.extraction.fields import extract_fields
from invoicechaser.extraction.schema import ExtractionResult
from pipeline.eval.metrics import evaluate_extraction

DEFAULT_GOLD_FILE = Path("data/gold/invoices.json")


def load_gold_dataset(gold_file: Path) -> list[tuple[str, ExtractionResult]]:
    """Load gold dataset from JSON file.

    The file holds a list of ``{"text": ..., "expected": {...}}`` objects;
    expected keys may be snake_case or camelCase and missing keys mean None.

    Args:
        gold_file: Path to gold dataset JSON

    Returns:
        List of (invoice_text, expected_result) tuples
    """
    with open(gold_file, encoding="utf-8") as f:
        data = json.load(f)

    return [(item["text"], ExtractionResult.model_validate(item["expected"])) for item in data]


def run_evaluation(gold_file: Path) -> dict[str, Any]:
    """Run evaluation on gold dataset.

    Args:
        gold_file: Path to gold dataset JSON file

    Returns:
        Evaluation results dict
    """
    samples = load_gold_dataset(gold_file)

    expected_list = [expected for _, expected in samples]
    predicted_list = [extract_fields(text) for text, _ in samples]

    report = evaluate_extraction(expected_list, predicted_list)

    return {
        "total_samples": report.total_samples,
        "macro_f1": round(report.macro_f1, 4),
        "field_metrics": {
            field: {
                "precision": round(metrics.precision, 4),
                "recall": round(metrics.recall, 4),
                "f1": round(metrics.f1, 4),
                "support": metrics.support,
            }
            for field, metrics in report.field_metrics.items()
        },
    }


if __name__ == "__main__":
    results = run_evaluation(DEFAULT_GOLD_FILE)

    print("\n" + "=" * 60)
    print("INVOICE EXTRACTION EVALUATION RESULTS")
    print("=" * 60)
    print(f"\nTotal Samples: {results['total_samples']}")
    print(f"Macro F1 Score: {results['macro_f1']:.1%}\n")

    print("Per-Field Metrics:")
    print("-" * 60)
    print(f"{'Field':<20} {'Precision':<12} {'Recall':<12} {'F1':<12}")
    print("-" * 60)

    for field, metrics in results["field_metrics"].items():
        print(
            f"{field:<20} {metrics['precision']:<12.1%} "
            f"{metrics['recall']:<12.1%} {metrics['f1']:<12.1%}"
        )

    print("=" * 60)
