#!/usr/bin/env python3
"""
Repeatability harness: score the same CSV/JSON file N times; assert identical results.
Exits 0 if stable, 1 if unstable. Prints variance report on failure.
Prints provenance (source_hash, record_type, standard_version) so you can verify
you're testing the same input and rubric as earlier runs.

Usage: python scripts/repeatability_check.py path/to/rows.csv [--runs 10] [--type control|et]
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from grc_scorer.sheet_parser import read_rows
from rubric.batch import process_batch
from rubric.utils import hash_text

DEFAULT_RUNS = 10


def _fingerprint(result: dict) -> str:
    return json.dumps(result, sort_keys=True, ensure_ascii=False)


def _item_variances(first: dict, other: dict) -> list[str]:
    diffs = []
    for a, b in zip(first["items"], other["items"]):
        if a.get("score") != b.get("score") or a.get("verdict") != b.get("verdict"):
            diffs.append(f"{a['id']}: {a.get('score')}/{a.get('verdict')} != {b.get('score')}/{b.get('verdict')}")
        elif _fingerprint(a) != _fingerprint(b):
            diffs.append(f"{a['id']}: details differ")
    return diffs


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("input", type=Path)
    parser.add_argument("--runs", type=int, default=DEFAULT_RUNS)
    parser.add_argument("--type", choices=["control", "et"])
    args = parser.parse_args()

    if not args.input.exists():
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    rows = read_rows(args.input)
    source_hash = hash_text(args.input.read_text(encoding="utf-8-sig"))

    print(f"Scoring {len(rows)} rows {args.runs} times...")
    results = [process_batch(rows, args.type) for _ in range(args.runs)]

    first = results[0]
    first_fp = _fingerprint(first)
    variances = []
    for i, r in enumerate(results[1:], start=2):
        if _fingerprint(r) == first_fp:
            continue
        if r["summary"] != first["summary"]:
            variances.append(("summary", i, f"{r['summary']} != {first['summary']}"))
        for diff in _item_variances(first, r)[:5]:
            variances.append(("item", i, diff))

    if variances:
        scores = [x["summary"]["avg_score"] for x in results]
        print("\n=== VARIANCE REPORT ===\n")
        print(f"Runs: {args.runs} | Input: {args.input}")
        print(f"Average score range: min={min(scores)}, max={max(scores)}")
        print()
        for stage, run, detail in variances:
            print(f"  Run {run} - {stage}: {detail}")
        print("\nRepeatability check FAILED.")
        sys.exit(1)

    print("\nPASS: Repeatability check passed.")
    print("\n--- Provenance ---")
    print(f"  source_hash: {source_hash}")
    print(f"  record_type: {first['record_type']}")
    print(f"  standard_version: {first['standard_version']}")
    print("\n--- Run metrics ---")
    print(f"  runs: {args.runs}")
    print(f"  items: {first['summary']['total']}")
    print(f"  errors: {first['summary']['errors']}")
    print(f"  avg_score: {first['summary']['avg_score']}")
    sys.exit(0)


if __name__ == "__main__":
    main()
