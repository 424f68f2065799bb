"""Audit trail for scoring runs and API operations."""

import json
import logging
import os
from pathlib import Path

from rubric.utils import iso_now

AUDIT_DIR = Path(os.environ.get("GRC_LOG_DIR") or Path(__file__).resolve().parent.parent / "logs")
AUDIT_FILE = AUDIT_DIR / "audit.log"
APP_LOG_FILE = AUDIT_DIR / "app.log"


def _ensure_log_dir():
    AUDIT_DIR.mkdir(parents=True, exist_ok=True)


def audit_log(
    action: str,
    status: str,
    *,
    record_type: str | None = None,
    standard_version: str | None = None,
    item_count: int | None = None,
    score: int | None = None,
    verdict: str | None = None,
    filename: str | None = None,
    error: str | None = None,
    extra: dict | None = None,
):
    """Append a structured audit entry to the audit log (JSONL)."""
    _ensure_log_dir()
    entry = {
        "timestamp": iso_now(),
        "action": action,
        "status": status,
    }
    if record_type:
        entry["record_type"] = record_type
    if standard_version:
        entry["standard_version"] = standard_version
    if item_count is not None:
        entry["item_count"] = item_count
    if score is not None:
        entry["score"] = score
    if verdict:
        entry["verdict"] = verdict
    if filename:
        entry["filename"] = filename
    if error:
        entry["error"] = error
    if extra:
        entry.update(extra)

    with open(AUDIT_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def setup_app_logging():
    """Configure application logging to console and file."""
    _ensure_log_dir()
    logger = logging.getLogger("grc_scorer")
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG)

    fmt = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(ch)

    # File
    fh = logging.FileHandler(APP_LOG_FILE, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(fh)

    # Batch driver logs under rubric.*; route it through the same handlers.
    engine_logger = logging.getLogger("rubric")
    engine_logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        if handler not in engine_logger.handlers:
            engine_logger.addHandler(handler)

    return logger
