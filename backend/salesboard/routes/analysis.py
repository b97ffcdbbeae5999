# Overview: Flask API routes for AI analysis; start, poll and discard a sales summary.

# backend/salesboard/routes/analysis.py
"""
AI analysis of the admin's filtered records.

POST starts a background summary of the records matching the given range
(same bounds as the records list) and returns 202. GET reports
{"in_progress": ..., "result": ...}. Starting again while a summary is
pending returns 409.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth, require_role
from ..models import Role
from ..services import record_service, view_service
from ..services.analysis_service import AnalysisInProgressError
from ..validation import ValidationError, validate_range_args


analysis_bp = Blueprint("analysis", __name__, url_prefix="/api/analysis")


def _runner():
    return current_app.extensions["analysis_runner"]


@analysis_bp.post("")
@require_auth
@require_role(Role.ADMIN)
def start_analysis_route():
    try:
        data = request.get_json(silent=True) or {}
        bounds = validate_range_args(data)
        records = view_service.filter_by_range(record_service.list_records(), **bounds)

        job = _runner().start(g.session_token.id, records)
        return jsonify(job.to_dict()), 202

    except AnalysisInProgressError as e:
        return jsonify({"error": str(e), "in_progress": True}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to start analysis")
        return jsonify({"error": "Internal server error"}), 500


@analysis_bp.get("")
@require_auth
@require_role(Role.ADMIN)
def analysis_status_route():
    return jsonify(_runner().status(g.session_token.id)), 200


@analysis_bp.delete("")
@require_auth
@require_role(Role.ADMIN)
def discard_analysis_route():
    _runner().discard(g.session_token.id)
    return "", 204
