"""
api.errors - JSON error handlers for the API blueprint.
"""

import logging

from flask import jsonify

from api import api_bp
from import_engine import ImportFailed
from services import ValidationError

logger = logging.getLogger(__name__)


@api_bp.errorhandler(404)
def api_not_found(_e):
    return jsonify({"error": "not found"}), 404


@api_bp.errorhandler(400)
def api_bad_request(_e):
    return jsonify({"error": "bad request"}), 400


@api_bp.errorhandler(405)
def api_method_not_allowed(_e):
    return jsonify({"error": "method not allowed"}), 405


@api_bp.errorhandler(413)
def api_too_large(_e):
    return jsonify({"error": "upload too large"}), 413


@api_bp.errorhandler(ValidationError)
def api_invalid(e):
    return jsonify({"error": str(e)}), 400


@api_bp.errorhandler(ImportFailed)
def api_import_failed(e):
    logger.error("CSV import failed: %s", e)
    return jsonify({"message": "CSV import failed", "error": str(e)}), 500


@api_bp.errorhandler(500)
def api_server_error(_e):
    return jsonify({"error": "internal server error"}), 500
