"""Batch scoring of spreadsheet-style rows, one isolated scoring call per row."""

import logging
import re

from rubric.scoring import controls, ets
from rubric.standards import load_standard

log = logging.getLogger(__name__)

# Normalized header -> field the scorers read.
HEADER_ALIASES = {
    "id": "id",
    "control_id": "id",
    "controlid": "id",
    "name": "name",
    "control_name": "name",
    "controlname": "name",
    "description": "description",
    "control_description": "description",
    "controldescription": "description",
    "guidance": "guidance",
    "control_guidance": "guidance",
    "controlguidance": "guidance",
    "implementation_guidance": "guidance",
    "what": "what_to_collect",
    "what_to_collect": "what_to_collect",
    "whattocollect": "what_to_collect",
    "how": "how_to_collect",
    "how_to_collect": "how_to_collect",
    "howtocollect": "how_to_collect",
    "et_id": "et_id",
    "etid": "et_id",
    "evidence_task_id": "et_id",
}
CONTROL_ID_HEADERS = {"control_id", "controlid"}
CONTROL_FIELDS = {"id", "name", "description", "guidance"}
ITEM_ID_FIELDS = ("id", "et_id", "title")


def normalize_header(key) -> str:
    """Lowercase, collapse spaces/underscores/hyphens: "Control ID" -> "control_id"."""
    return re.sub(r"[\s_-]+", "_", str(key).strip().lower()).strip("_")


def normalize_row(row: dict) -> dict:
    """Rename columns onto scorer fields. Columns with no alias keep their normalized name."""
    out = {}
    for key, value in row.items():
        header = normalize_header(key)
        out[HEADER_ALIASES.get(header, header)] = value
    return out


def detect_record_type(rows: list[dict]) -> str:
    """
    "control" when the headers carry a control ID column, or all four control
    fields; "et" otherwise.
    """
    if not rows:
        return "et"
    headers = {normalize_header(k) for k in rows[0]}
    fields = {HEADER_ALIASES.get(h, h) for h in headers}
    if headers & CONTROL_ID_HEADERS or CONTROL_FIELDS <= fields:
        return "control"
    return "et"


def item_id(row: dict, index: int) -> str:
    for field in ITEM_ID_FIELDS:
        value = row.get(field)
        if value is not None and str(value).strip():
            return str(value).strip()
    return f"item-{index + 1}"


def _scorer_for(record_type: str):
    if record_type == "control":
        return controls.score_control
    if record_type == "et":
        return ets.score_et
    raise ValueError(f"Unknown record type: {record_type!r}")


def process_batch(
    rows: list[dict],
    record_type: str | None = None,
    standard: dict | None = None,
    on_progress=None,
) -> dict:
    """
    Score rows in order. A row whose scoring raises is recorded as an error
    item and left out of the average; the rest of the batch carries on.
    on_progress(done, total) is called after every row.
    """
    record_type = record_type or detect_record_type(rows)
    scorer = _scorer_for(record_type)
    standard = standard or load_standard(record_type)
    total_rows = len(rows)

    items = []
    errors = 0
    score_sum = 0
    for index, raw in enumerate(rows):
        item = {"index": index, "id": f"item-{index + 1}", "type": record_type}
        try:
            row = normalize_row(raw)
            item["id"] = item_id(row, index)
            result = scorer(row, standard)
            item.update(
                status="success",
                score=result["total"]["score"],
                verdict=result["verdict"],
                details=result,
            )
            score_sum += item["score"]
        except Exception as e:
            log.exception("Scoring failed for row %d (%s)", index + 1, item["id"])
            item.update(status="error", error=str(e) or e.__class__.__name__)
            errors += 1
        items.append(item)
        if on_progress:
            on_progress(index + 1, total_rows)

    succeeded = total_rows - errors
    summary = {
        "total": total_rows,
        "processed": len(items),
        "errors": errors,
        "avg_score": round(score_sum / succeeded, 2) if succeeded else 0,
    }
    log.info(
        "Batch complete: type=%s total=%d errors=%d avg_score=%s",
        record_type, total_rows, errors, summary["avg_score"],
    )
    return {
        "record_type": record_type,
        "standard_version": standard["meta"]["version"],
        "items": items,
        "summary": summary,
    }
