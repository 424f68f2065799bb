"""Batch exports: CSV layout and PDF generation."""

import csv
import io

from grc_scorer.reports import BatchReportPDF, batch_results_csv, generate_batch_pdf
from rubric.batch import process_batch

ROWS = [
    {
        "Control ID": "GDPR.1.1",
        "Name": "Access Review <Process> & Co",
        "Description": "User access is reviewed quarterly.",
        "Guidance": "1. Export the access list\n2. Review each account",
    },
    {"Control ID": "", "Name": "", "Description": "", "Guidance": ""},
]


def _batch_with_error() -> dict:
    result = process_batch(ROWS, "control")
    result["items"].append({"index": 2, "id": "item-3", "type": "control", "status": "error", "error": "boom"})
    result["summary"] = {"total": 3, "processed": 3, "errors": 1, "avg_score": 41.5}
    return result


def test_csv_results_then_summary():
    text = batch_results_csv(_batch_with_error())
    results_block, summary_block = text.split("\n\n")

    rows = list(csv.DictReader(io.StringIO(results_block)))
    assert [r["ID"] for r in rows] == ["GDPR.1.1", "item-2", "item-3"]
    assert rows[0]["Type"] == "CONTROL"
    assert rows[0]["Status"] == "SUCCESS"
    assert rows[2] == {"ID": "item-3", "Type": "CONTROL", "Status": "ERROR", "Score": "N/A", "Verdict": "N/A", "Error": "boom"}
    assert rows[1]["Verdict"] == "fail"

    summary = list(csv.reader(io.StringIO(summary_block)))
    assert summary == [
        ["Metric", "Value"],
        ["Total Items", "3"],
        ["Processed", "3"],
        ["Errors", "1"],
        ["Average Score", "41.50"],
    ]


def test_pdf_bytes():
    pdf = generate_batch_pdf(_batch_with_error())
    assert pdf.startswith(b"%PDF")


def test_pdf_to_path(tmp_path):
    out = tmp_path / "report.pdf"
    assert BatchReportPDF(out).generate(_batch_with_error(), title="Controls") == out
    assert out.read_bytes().startswith(b"%PDF")
