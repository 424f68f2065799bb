"""Row readers for batch uploads (CSV and JSON spreadsheet exports)."""

import csv
import io
import json
from pathlib import Path

SUPPORTED_SUFFIXES = (".csv", ".json")


def _read_text(source) -> str:
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes().decode("utf-8-sig")
    data = source.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8-sig")
    return data


def _rows_from_csv(text: str) -> list[dict]:
    reader = csv.DictReader(io.StringIO(text))
    rows = []
    for raw in reader:
        # Cells past the header row land under the None key; ignore them.
        row = {k.strip(): (v or "").strip() for k, v in raw.items() if k is not None}
        if any(row.values()):
            rows.append(row)
    return rows


def _rows_from_json(text: str) -> list[dict]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e
    if isinstance(data, dict):
        data = data.get("items", [data])
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise ValueError("JSON file must hold a list of records or {\"items\": [...]}")
    return data


def read_rows(source, filename: str | None = None) -> list[dict]:
    """
    Read rows from a path or an open file. filename picks the format when
    source is a stream (e.g. an uploaded file).

    Raises ValueError for unsupported types and empty files.
    """
    name = filename or (str(source) if isinstance(source, (str, Path)) else "")
    suffix = Path(name).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file type: {suffix or name or 'unknown'} (use .csv or .json)")

    text = _read_text(source)
    rows = _rows_from_csv(text) if suffix == ".csv" else _rows_from_json(text)
    if not rows:
        raise ValueError("No data found in file")
    return rows
