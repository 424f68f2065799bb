"""Exports for batch results: CSV summary and PDF report."""

import csv
import io
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

RESULT_COLUMNS = ["ID", "Type", "Status", "Score", "Verdict", "Error"]


def _format_score(score) -> str:
    return f"{score:.2f}" if isinstance(score, (int, float)) else "N/A"


def result_rows(batch_result: dict) -> list[dict]:
    """One export row per batch item."""
    return [
        {
            "ID": item["id"],
            "Type": item["type"].upper(),
            "Status": item["status"].upper(),
            "Score": _format_score(item.get("score")),
            "Verdict": item.get("verdict") or "N/A",
            "Error": item.get("error") or "",
        }
        for item in batch_result["items"]
    ]


def summary_rows(batch_result: dict) -> list[tuple[str, str]]:
    s = batch_result["summary"]
    return [
        ("Total Items", str(s["total"])),
        ("Processed", str(s["processed"])),
        ("Errors", str(s["errors"])),
        ("Average Score", _format_score(s["avg_score"])),
    ]


def batch_results_csv(batch_result: dict) -> str:
    """Results table, a blank line, then a Metric/Value summary block."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=RESULT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(result_rows(batch_result))

    buf.write("\n")
    summary = csv.writer(buf, lineterminator="\n")
    summary.writerow(["Metric", "Value"])
    summary.writerows(summary_rows(batch_result))
    return buf.getvalue()


class BatchReportPDF:
    """Builds a PDF report of a batch run: summary table plus a section per item."""

    def __init__(self, output, max_suggestions: int = 3):
        # output is a path or a writable binary buffer
        self.output = output
        self.max_suggestions = max_suggestions

    def _styles(self) -> dict:
        styles = getSampleStyleSheet()
        return {
            "title": ParagraphStyle(
                "ReportTitle",
                parent=styles["Heading1"],
                fontSize=18,
                spaceAfter=12,
                alignment=TA_CENTER,
            ),
            "heading": ParagraphStyle(
                "ItemHeading",
                parent=styles["Heading2"],
                fontSize=12,
                spaceBefore=12,
                spaceAfter=6,
            ),
            "body": styles["Normal"],
        }

    def _summary_table(self, batch_result: dict) -> Table:
        table = Table([["Metric", "Value"], *summary_rows(batch_result)], colWidths=[2.5 * inch, 1.5 * inch])
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1e293b")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#94a3b8")),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ]
            )
        )
        return table

    def _item_story(self, item: dict, styles: dict) -> list:
        story = [Paragraph(escape(f"{item['id']} ({item['type'].upper()})"), styles["heading"])]
        if item["status"] != "success":
            story.append(Paragraph(f"<b>Error:</b> {escape(item.get('error') or 'unknown')}", styles["body"]))
            return story

        details = item["details"]
        gated = " (gated fail)" if details["total"].get("gated_fail") else ""
        story.append(
            Paragraph(
                f"<b>Verdict:</b> {escape(details['verdict'])}{gated} | "
                f"<b>Total:</b> {details['total']['score']}/{details['total']['max']}",
                styles["body"],
            )
        )
        for dim in details["dimensions"].values():
            story.append(
                Paragraph(f"• {escape(dim['label'])}: {dim['score']} (weight {dim['weight']:.2f})", styles["body"])
            )
        suggestions = details.get("suggestions", [])[: self.max_suggestions]
        if suggestions:
            story.append(Paragraph("<b>Top suggestions</b>", styles["body"]))
            for s in suggestions:
                story.append(Paragraph(f"- {escape(s)}", styles["body"]))
        return story

    def generate(self, batch_result: dict, title: str = "Content Quality Report"):
        """Render the report. Returns the output (path or buffer) it was written to."""
        target = str(self.output) if isinstance(self.output, Path) else self.output
        doc = SimpleDocTemplate(
            target,
            pagesize=letter,
            rightMargin=inch,
            leftMargin=inch,
            topMargin=inch,
            bottomMargin=inch,
        )
        styles = self._styles()
        story = [
            Paragraph(escape(title), styles["title"]),
            Paragraph(
                escape(
                    f"Record type: {batch_result.get('record_type', 'n/a').upper()} | "
                    f"Rubric version: {batch_result.get('standard_version', 'n/a')}"
                ),
                styles["body"],
            ),
            Spacer(1, 0.2 * inch),
            self._summary_table(batch_result),
            Spacer(1, 0.3 * inch),
        ]
        for item in batch_result["items"]:
            story.extend(self._item_story(item, styles))

        doc.build(story)
        return self.output


def generate_batch_pdf(batch_result: dict) -> bytes:
    """PDF report as bytes (for HTTP downloads)."""
    buffer = BytesIO()
    BatchReportPDF(buffer).generate(batch_result)
    return buffer.getvalue()
