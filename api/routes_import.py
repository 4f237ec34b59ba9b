"""
api.routes_import - /api/v1/podcasts/import endpoint.

Accepts CSV via multipart file upload or raw request body.
"""

from flask import request, jsonify

from api import api_bp
from import_engine import run_import

_TRUTHY = ("1", "true", "yes", "on")


@api_bp.route("/podcasts/import", methods=["POST"])
def api_import_csv():
    """
    POST /api/v1/podcasts/import?overwrite=true|false

    Multipart: field name 'csv_file' (or 'csvFile')
    Or: raw CSV as request body (Content-Type: text/csv).

    A CSV that cannot be read answers 500 with a single message
    (see api.errors); row problems are listed in the report instead.
    """
    overwrite = request.args.get("overwrite", "false").lower() in _TRUTHY

    if request.content_type and "multipart" in request.content_type:
        f = request.files.get("csv_file") or request.files.get("csvFile")
        if not f:
            return jsonify({"error": "no csv_file in upload"}), 400
        content = f.stream
    else:
        content = request.get_data()
        if not content:
            return jsonify({"error": "empty body"}), 400

    report = run_import(content, overwrite=overwrite)
    return jsonify(report.to_dict())
