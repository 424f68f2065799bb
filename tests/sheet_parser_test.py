"""Row readers for CSV and JSON uploads."""

import io
import json

import pytest

from grc_scorer.sheet_parser import read_rows


def test_csv_rows_from_path(tmp_path):
    path = tmp_path / "controls.csv"
    path.write_text(
        "Control ID,Name\n GDPR.1.1 , Access Review \n,\nNIST.AC.2,Account Management\n",
        encoding="utf-8",
    )
    assert read_rows(path) == [
        {"Control ID": "GDPR.1.1", "Name": "Access Review"},
        {"Control ID": "NIST.AC.2", "Name": "Account Management"},
    ]


def test_csv_with_bom_and_multiline_cell():
    data = '\ufeffWhat,How\n"Provide evidence that backups run.","1. Attach the log\n2. Attach the report"\n'
    rows = read_rows(io.BytesIO(data.encode("utf-8")), "ets.csv")
    assert rows == [{"What": "Provide evidence that backups run.", "How": "1. Attach the log\n2. Attach the report"}]


def test_json_list_and_items_object():
    records = [{"what_to_collect": "a", "how_to_collect": "b"}]
    assert read_rows(io.StringIO(json.dumps(records)), "ets.json") == records
    assert read_rows(io.StringIO(json.dumps({"items": records})), "ets.json") == records


def test_unsupported_type():
    with pytest.raises(ValueError, match="Unsupported file type"):
        read_rows(io.BytesIO(b"data"), "controls.xlsx")


def test_empty_file():
    with pytest.raises(ValueError, match="No data found"):
        read_rows(io.BytesIO(b"Control ID,Name\n"), "controls.csv")


def test_invalid_json():
    with pytest.raises(ValueError, match="Invalid JSON"):
        read_rows(io.BytesIO(b"{not json"), "rows.json")


def test_json_must_hold_records():
    with pytest.raises(ValueError):
        read_rows(io.BytesIO(b"[1, 2]"), "rows.json")


def test_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_rows(tmp_path / "missing.csv")
