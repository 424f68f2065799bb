"""Generate run_report.json for a batch run."""

import json
import uuid
from pathlib import Path

from rubric.utils import iso_now


def write_run_report(
    output_path: Path,
    batch_result: dict,
    source_name: str,
    source_hash: str,
    run_id: str | None = None,
) -> dict:
    """
    Write run_report.json with rubric version, source hash, summary and one
    line per item. Item text is not copied in; only ids, scores and verdicts.
    """
    report = {
        "run_id": run_id or str(uuid.uuid4())[:8],
        "timestamp": iso_now(),
        "source": source_name,
        "source_hash": source_hash,
        "record_type": batch_result["record_type"],
        "standard_version": batch_result["standard_version"],
        "summary": batch_result["summary"],
        "verdict_counts": _verdict_counts(batch_result["items"]),
        "items": [
            {
                "id": item["id"],
                "status": item["status"],
                "score": item.get("score"),
                "verdict": item.get("verdict"),
                "gated_fail": item.get("details", {}).get("total", {}).get("gated_fail"),
                "error": item.get("error"),
            }
            for item in batch_result["items"]
        ],
    }
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    return report


def _verdict_counts(items: list[dict]) -> dict:
    counts = {"pass": 0, "partial": 0, "fail": 0}
    for item in items:
        if item.get("verdict") in counts:
            counts[item["verdict"]] += 1
    return counts
