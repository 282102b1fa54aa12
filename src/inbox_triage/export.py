"""Export triage results to CSV or JSON."""

import csv
import json

from .models import TriageResult

_FIELDNAMES = [
    "message_id",
    "sender",
    "subject",
    "action",
    "category",
    "score",
    "confidence",
    "reason",
]


def export_recommendations(result: TriageResult, format: str, output_path: str) -> None:
    """Export triage results to a file.

    Args:
        result: The triage result to export.
        format: Output format, either 'csv' or 'json'.
        output_path: Path to write the output file.
    """
    if format == "csv":
        with open(output_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=_FIELDNAMES)
            writer.writeheader()
            for record, rec in result.pairs():
                writer.writerow(
                    {
                        "message_id": rec.message_id,
                        "sender": record.sender,
                        "subject": record.subject,
                        "action": rec.action,
                        "category": rec.category,
                        "score": rec.score,
                        "confidence": rec.confidence,
                        "reason": rec.reason,
                    }
                )
    elif format == "json":
        payload = {
            "run_date": result.run_date,
            "query": result.query,
            "summary": result.summary.to_dict(),
            "recommendations": [
                {"sender": record.sender, "subject": record.subject, **rec.to_dict()}
                for record, rec in result.pairs()
            ],
        }
        with open(output_path, "w") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
    else:
        raise ValueError(f"Unsupported export format '{format}'")
