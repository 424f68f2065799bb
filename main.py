#!/usr/bin/env python3
"""CLI for scoring a single Control or Evidence Task."""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from grc_scorer.service import RequestShapeError, score_payload

load_dotenv()


def _print_result(result: dict) -> None:
    total = result["total"]
    gated = " (gated: critical check failed)" if total["gated_fail"] else ""
    print(f"=== Verdict: {result['verdict'].upper()}{gated} ===")
    print(f"Total: {total['score']}/{total['max']}  [{total['formula']}]\n")
    for dim in result["dimensions"].values():
        print(f"{dim['label']}: {dim['score']}")
        for check in dim["checks"]:
            print(f"  [{check['status']:<4}] {check['id']:<32} {check['points']}/{check['max']}")
    if result["suggestions"]:
        print("\nSuggestions:")
        for s in result["suggestions"]:
            print(f"  • {s}")
    if result.get("proposed"):
        print("\nProposed rewrite:")
        print(f"  What: {result['proposed']['what']}")
        print(f"  How:  {result['proposed']['how']}")


def _emit(record_type: str, body, as_json: bool) -> None:
    try:
        response = score_payload(record_type, body)
    except RequestShapeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if as_json:
        print(json.dumps(response, indent=2, ensure_ascii=False))
        return
    print(f"Rubric version: {response['standard_version']}\n")
    for i, result in enumerate(response["results"]):
        if i:
            print("\n" + "-" * 60 + "\n")
        _print_result(result)


def cmd_control(args: argparse.Namespace) -> None:
    body = {
        "id": args.id,
        "name": args.name,
        "description": args.description,
        "guidance": args.guidance.replace("\\n", "\n"),
    }
    _emit("control", body, args.json)


def cmd_et(args: argparse.Namespace) -> None:
    body = {
        "what_to_collect": args.what,
        "how_to_collect": args.how.replace("\\n", "\n"),
    }
    _emit("et", body, args.json)


def cmd_file(args: argparse.Namespace) -> None:
    path = Path(args.path)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        body = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Error: {path} is not valid JSON: {e}", file=sys.stderr)
        sys.exit(1)
    _emit(args.type, body, args.json)


def main() -> None:
    parser = argparse.ArgumentParser(description="Score GRC content against the rubric standard")
    sub = parser.add_subparsers(dest="command", required=True)

    p_control = sub.add_parser("control", help="Score a Control given on the command line")
    p_control.add_argument("--id", default="", help="Control ID, e.g. GDPR.1.1")
    p_control.add_argument("--name", default="", help="Control name")
    p_control.add_argument("--description", default="", help="Control description")
    p_control.add_argument("--guidance", default="", help="Guidance text (use \\n for line breaks)")
    p_control.add_argument("--json", action="store_true", help="Output JSON")
    p_control.set_defaults(func=cmd_control)

    p_et = sub.add_parser("et", help="Score an Evidence Task given on the command line")
    p_et.add_argument("--what", default="", help="What to collect")
    p_et.add_argument("--how", default="", help="How to collect (use \\n for line breaks)")
    p_et.add_argument("--json", action="store_true", help="Output JSON")
    p_et.set_defaults(func=cmd_et)

    p_file = sub.add_parser("file", help="Score a JSON file holding one record or {items: [...]}")
    p_file.add_argument("path", type=Path, help="Path to the JSON file")
    p_file.add_argument("--type", choices=["control", "et"], required=True, help="Record type")
    p_file.add_argument("--json", action="store_true", help="Output JSON")
    p_file.set_defaults(func=cmd_file)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
