# Overview: Request and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .models import Role
from .services import session_service


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip()


def require_auth(f):
    """
    Require a valid session token.

    Sets the following Flask g attributes:
    - g.current_user: the authenticated User
    - g.session_token: the SessionToken row
    - g.token: the plaintext bearer token
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        session = session_service.validate_session(token)
        if not session:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_user = session.user
        g.session_token = session
        g.token = token
        return f(*args, **kwargs)

    return decorated_function


def require_role(role: Role):
    """Require the authenticated user to hold a role. Use after @require_auth."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not hasattr(g, "current_user"):
                return jsonify({"error": "Authentication required"}), 401
            if g.current_user.role != role.value:
                return jsonify({
                    "error": "Permission denied",
                    "required_role": role.value,
                }), 403
            return f(*args, **kwargs)

        return decorated_function
    return decorator
