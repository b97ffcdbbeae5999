# Overview: Service-layer operations for session; bearer tokens for logged-in users.

"""
Session Token Management

Tokens are random, handed to the client once, and stored only as a SHA-256
hash. Sessions last until logout; there is no idle or absolute timeout.
"""

import secrets
import hashlib

from ..extensions import db
from ..models import SessionToken, User
from ..time_utils import utcnow


def generate_token() -> str:
    """Returns 64-character hex string (32 bytes of entropy)."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def create_session(user: User, column_visibility: dict | None = None) -> tuple[SessionToken, str]:
    """
    Create a session for a user.

    Returns (session_record, plaintext_token).
    """
    plaintext_token = generate_token()
    now = utcnow()
    session = SessionToken(
        user_id=user.id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        last_used_at=now,
        column_visibility=column_visibility,
    )
    db.session.add(session)
    db.session.commit()
    return session, plaintext_token


def validate_session(token: str) -> SessionToken | None:
    """Active session for a token, or None. Touches last_used_at."""
    if not token:
        return None
    session = db.session.query(SessionToken).filter_by(token_hash=hash_token(token)).first()
    if not session or not session.is_active or not session.user:
        return None
    session.last_used_at = utcnow()
    db.session.commit()
    return session


def revoke_session(token: str) -> bool:
    session = db.session.query(SessionToken).filter_by(token_hash=hash_token(token)).first()
    if not session or not session.is_active:
        return False
    session.revoked_at = utcnow()
    db.session.commit()
    return True

