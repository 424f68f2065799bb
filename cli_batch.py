#!/usr/bin/env python3
"""CLI for scoring a CSV/JSON file of Controls or Evidence Tasks."""

import argparse
import json
import sys
import uuid
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from grc_scorer.audit import setup_app_logging
from grc_scorer.reports import BatchReportPDF, batch_results_csv
from grc_scorer.sheet_parser import read_rows
from rubric.batch import process_batch
from rubric.run_report import write_run_report
from rubric.standards import load_standard
from rubric.utils import hash_text


def _progress(done: int, total: int) -> None:
    print(f"\rScored {done}/{total}", end="" if done < total else "\n", file=sys.stderr, flush=True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Batch-score a CSV/JSON file against the rubric standard")
    parser.add_argument("input", type=Path, help="Path to .csv or .json file")
    parser.add_argument("--type", choices=["control", "et"], help="Record type (default: detect from headers)")
    parser.add_argument("--standard", type=Path, help="Path to a standard JSON overriding the packaged one")
    parser.add_argument("--reports-dir", type=Path, default=Path("artifacts"), help="Directory for run_report.json")
    parser.add_argument("--csv", type=Path, help="Also write a CSV export here")
    parser.add_argument("--pdf", type=Path, help="Also write a PDF report here")
    parser.add_argument("--json", action="store_true", help="Output the full batch result as JSON")
    args = parser.parse_args()

    setup_app_logging()

    if not args.input.exists():
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        sys.exit(1)
    try:
        rows = read_rows(args.input)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.standard and not args.type:
        print("Error: --standard requires --type", file=sys.stderr)
        sys.exit(1)
    standard = load_standard(args.type, args.standard) if args.standard else None

    result = process_batch(rows, args.type, standard, on_progress=_progress)

    run_id = str(uuid.uuid4())[:8]
    report_path = args.reports_dir / f"run_report_{run_id}.json"
    write_run_report(
        report_path,
        result,
        source_name=args.input.name,
        source_hash=hash_text(args.input.read_text(encoding="utf-8-sig")),
        run_id=run_id,
    )
    print(f"Run report: {report_path}", file=sys.stderr)

    if args.csv:
        args.csv.parent.mkdir(parents=True, exist_ok=True)
        args.csv.write_text(batch_results_csv(result), encoding="utf-8")
        print(f"CSV export: {args.csv}", file=sys.stderr)
    if args.pdf:
        args.pdf.parent.mkdir(parents=True, exist_ok=True)
        BatchReportPDF(args.pdf).generate(result)
        print(f"PDF report: {args.pdf}", file=sys.stderr)

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return

    summary = result["summary"]
    print(f"=== Batch ({result['record_type'].upper()}, rubric {result['standard_version']}) ===")
    print(f"Total: {summary['total']} | Processed: {summary['processed']} | Errors: {summary['errors']}")
    print(f"Average score: {summary['avg_score']:.2f}\n")
    for item in result["items"]:
        if item["status"] == "success":
            print(f"  {item['id']:<24} {item['score']:>3}  {item['verdict']}")
        else:
            print(f"  {item['id']:<24} ERR  {item['error']}")


if __name__ == "__main__":
    main()
