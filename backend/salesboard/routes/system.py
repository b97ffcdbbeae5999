# backend/salesboard/routes/system.py
"""System health endpoint."""

import time
from flask import Blueprint, current_app, jsonify

from ..extensions import db
from ..models import SaleRecord, User

system_bp = Blueprint("system", __name__)


def check_store_health() -> dict:
    """Store reachability and row counts."""
    start_time = time.time()
    try:
        record_count = db.session.query(SaleRecord).count()
        user_count = db.session.query(User).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "records": record_count,
                "users": user_count,
            },
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Store health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    store = check_store_health()
    healthy = store["status"] == "healthy"
    return jsonify({
        "status": "healthy" if healthy else "unhealthy",
        "checks": {
            "store": store,
            "ai_analysis": {
                "enabled": bool(current_app.config.get("GEMINI_API_KEY")),
                "model": current_app.config.get("GEMINI_MODEL"),
            },
        },
    }), 200 if healthy else 503
