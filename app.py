#!/usr/bin/env python3
"""Flask web app for the GRC content scorer."""

import os
from io import BytesIO

from dotenv import load_dotenv
from flask import Flask, jsonify, request, send_file

from grc_scorer.audit import audit_log, setup_app_logging
from grc_scorer.reports import batch_results_csv, generate_batch_pdf
from grc_scorer.service import RequestShapeError, score_payload
from grc_scorer.sheet_parser import read_rows
from rubric.batch import process_batch
from rubric.standards import load_standard

load_dotenv()

log = setup_app_logging()

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024  # 16MB


@app.route("/health", methods=["GET"])
def health():
    """Liveness plus the rubric versions currently loaded."""
    return jsonify({
        "status": "ok",
        "standards": {
            "control": load_standard("control")["meta"]["version"],
            "et": load_standard("et")["meta"]["version"],
        },
    })


def _score(record_type: str):
    body = request.get_json(silent=True)
    if body is None:
        audit_log(action=f"score_{record_type}", status="error", record_type=record_type, error="malformed JSON")
        return jsonify({"error": "Request body must be valid JSON"}), 400

    try:
        response = score_payload(record_type, body)
    except RequestShapeError as e:
        audit_log(action=f"score_{record_type}", status="error", record_type=record_type, error=str(e))
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        audit_log(action=f"score_{record_type}", status="error", record_type=record_type, error=str(e))
        log.exception("Scoring failed")
        return jsonify({"error": str(e)}), 500

    results = response["results"]
    audit_log(
        action=f"score_{record_type}",
        status="success",
        record_type=record_type,
        standard_version=response["standard_version"],
        item_count=len(results),
        score=results[0]["total"]["score"] if len(results) == 1 else None,
        verdict=results[0]["verdict"] if len(results) == 1 else None,
    )
    log.info("Scored %d %s record(s) against %s", len(results), record_type, response["standard_version"])
    return jsonify(response)


@app.route("/score/control", methods=["POST"])
@app.route("/api/controls/score", methods=["POST"])
def score_control_route():
    """Score one Control or an {items: [...]} batch of Controls."""
    return _score("control")


@app.route("/score/et", methods=["POST"])
@app.route("/api/et/score", methods=["POST"])
def score_et_route():
    """Score one Evidence Task or an {items: [...]} batch."""
    return _score("et")


@app.route("/api/batch", methods=["POST"])
def api_batch():
    """Score every row of an uploaded CSV/JSON file."""
    if "file" not in request.files:
        return jsonify({"error": "No file provided"}), 400

    file = request.files["file"]
    if file.filename == "":
        return jsonify({"error": "No file selected"}), 400

    record_type = (request.form.get("type") or "").strip().lower() or None
    if record_type not in (None, "control", "et"):
        return jsonify({"error": "type must be 'control' or 'et'"}), 400

    log.info("Batch upload started: filename=%s type=%s", file.filename, record_type or "auto")
    try:
        rows = read_rows(file.stream, file.filename)
    except ValueError as e:
        audit_log(action="batch", status="error", filename=file.filename, error=str(e))
        return jsonify({"error": str(e)}), 400

    try:
        result = process_batch(rows, record_type)
    except Exception as e:
        audit_log(action="batch", status="error", filename=file.filename, error=str(e))
        log.exception("Batch failed")
        return jsonify({"error": str(e)}), 500

    audit_log(
        action="batch",
        status="success",
        record_type=result["record_type"],
        standard_version=result["standard_version"],
        item_count=result["summary"]["total"],
        filename=file.filename,
        extra={"errors": result["summary"]["errors"], "avg_score": result["summary"]["avg_score"]},
    )
    return jsonify(result)


@app.route("/api/batch/export", methods=["POST"])
def api_batch_export():
    """Download a batch result as CSV or PDF."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get("items"), list) or "summary" not in data:
        return jsonify({"error": "Body must be a batch result with 'items' and 'summary'"}), 400

    fmt = (request.args.get("format") or data.get("format") or "csv").lower()
    if fmt not in ("csv", "pdf"):
        return jsonify({"error": "format must be 'csv' or 'pdf'"}), 400

    try:
        if fmt == "csv":
            payload = batch_results_csv(data).encode("utf-8")
            mimetype = "text/csv"
        else:
            payload = generate_batch_pdf(data)
            mimetype = "application/pdf"
    except (KeyError, TypeError) as e:
        audit_log(action="batch_export", status="error", error=f"{type(e).__name__}: {e}")
        return jsonify({"error": f"Malformed batch result: {e}"}), 400
    except Exception as e:
        audit_log(action="batch_export", status="error", error=str(e))
        log.exception("Export failed")
        return jsonify({"error": str(e)}), 500

    filename = f"batch-results.{fmt}"
    audit_log(action="batch_export", status="success", filename=filename, item_count=len(data["items"]))
    return send_file(
        BytesIO(payload),
        mimetype=mimetype,
        as_attachment=True,
        download_name=filename,
    )


if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    log.info("GRC scorer starting on http://127.0.0.1:%d | Logs: logs/app.log | Audit: logs/audit.log", port)
    app.run(debug=True, port=port)
