"""GRC Scorer - HTTP, batch and reporting layer around the rubric engine."""

from grc_scorer.reports import BatchReportPDF, batch_results_csv, generate_batch_pdf
from grc_scorer.sheet_parser import read_rows

__all__ = ["BatchReportPDF", "batch_results_csv", "generate_batch_pdf", "read_rows"]
