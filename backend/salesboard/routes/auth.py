# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/salesboard/routes/auth.py
"""
Login / logout.

Passwords are compared in plain text. Administrators get their own table
column map for the lifetime of the session.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth
from ..services import session_service, user_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Token must be included in Authorization header for protected routes.
    """
    try:
        data = request.get_json(silent=True) or {}
        username = data.get("username")
        password = data.get("password")

        if not all([username, password]):
            return jsonify({"error": "username and password required"}), 400

        user = user_service.authenticate(username, password)
        if not user:
            return jsonify({"error": "Invalid username or password"}), 401

        session, token = session_service.create_session(user)
        current_app.logger.info("User %s logged in as %s", user.username, user.role)

        return jsonify({
            "token": token,
            "user": user.to_dict(),
        }), 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    try:
        session_service.revoke_session(g.token)
        analysis = current_app.extensions["analysis_runner"]
        analysis.discard(g.session_token.id)
        return jsonify({"message": "Logged out"}), 200
    except Exception:
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({"user": g.current_user.to_dict()}), 200
