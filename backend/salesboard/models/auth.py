from __future__ import annotations

import enum

from ..extensions import db
from ..time_utils import utcnow


class Role(str, enum.Enum):
    ADMIN = "Admin"
    CUSTOMER = "Customer"


class User(db.Model):
    """
    Login identity.

    Passwords are kept and compared in plain text; the dashboard shows them
    to administrators. Customer users are created automatically the first
    time a sale is saved for a new customer name.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("username", name="uq_users_username"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(255), nullable=False, index=True)
    password = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(16), nullable=False, default=Role.CUSTOMER.value)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def to_dict(self, include_password: bool = False) -> dict:
        data = {
            "id": self.id,
            "username": self.username,
            "role": self.role,
        }
        if include_password:
            data["password"] = self.password
        return data


class SessionToken(db.Model):
    """
    Login session.

    Only the SHA-256 of the bearer token is stored. The administrator's
    table-column visibility map lives here because it is per session.
    """
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_user_id", "user_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token_hash = db.Column(db.String(64), nullable=False, unique=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    last_used_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    revoked_at = db.Column(db.DateTime, nullable=True)

    # Admin table column map (field -> shown), in column order
    column_visibility = db.Column(db.JSON, nullable=True)

    user = db.relationship("User", backref=db.backref("sessions", lazy=True, cascade="all, delete-orphan"))

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None
