# Overview: Service-layer operations for users; the in-memory user store.

"""
User Store

Passwords are plain strings: they are compared as-is at login and shown to
administrators in user management. Customer accounts are provisioned
automatically by the record save path (see ensure_customer_user).
"""

from __future__ import annotations

from ..extensions import db
from ..models import Role, User
from ..validation import ConflictError, ValidationError
from .username_service import to_username


def parse_role(value) -> Role:
    """'Admin' / 'Customer' (any case) -> Role."""
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        for role in Role:
            if role.value.lower() == value.strip().lower():
                return role
    raise ValidationError(f"role must be one of: {', '.join(r.value for r in Role)}")


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.id).all()


def get_user(user_id: int) -> User | None:
    return db.session.get(User, user_id)


def find_by_username(username: str) -> User | None:
    return db.session.query(User).filter_by(username=username).first()


def authenticate(username: str, password: str) -> User | None:
    """User whose username and plain password both match exactly."""
    user = find_by_username(username)
    if not user or user.password is None:
        return None
    if user.password != password:
        return None
    return user


def create_user(username: str, password: str | None, role=Role.CUSTOMER, *, commit: bool = True) -> User:
    """
    Create a user. Username must be non-blank and not taken.

    Raises ValidationError for a blank username or unknown role and
    ConflictError for a duplicate username.
    """
    username = (username or "").strip()
    if not username:
        raise ValidationError("username cannot be blank")
    role = parse_role(role)
    if find_by_username(username):
        raise ConflictError(f"Username '{username}' already exists")

    user = User(username=username, password=password, role=role.value)
    db.session.add(user)
    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return user


def upsert_user(data: dict) -> User:
    """
    Insert or fully replace a user.

    With an "id" that exists, username/password/role are replaced;
    otherwise a new user is created.
    """
    user_id = data.get("id")
    user = get_user(user_id) if user_id is not None else None
    if user is None:
        return create_user(data.get("username"), data.get("password"), data.get("role", Role.CUSTOMER))

    username = (data.get("username") or "").strip()
    if not username:
        raise ValidationError("username cannot be blank")
    clash = find_by_username(username)
    if clash and clash.id != user.id:
        raise ConflictError(f"Username '{username}' already exists")

    user.username = username
    user.password = data.get("password")
    user.role = parse_role(data.get("role", user.role)).value
    db.session.commit()
    return user


def set_role(user_id: int, role) -> User | None:
    """Change a user's role. Returns None when the user does not exist."""
    role = parse_role(role)
    user = get_user(user_id)
    if not user:
        return None
    user.role = role.value
    db.session.commit()
    return user


def set_password(user_id: int, password: str | None) -> User | None:
    """
    Replace a user's password. An empty password leaves it unchanged.

    Returns None when the user does not exist.
    """
    user = get_user(user_id)
    if not user:
        return None
    if not password:
        return user
    user.password = password
    db.session.commit()
    return user


def ensure_customer_user(customer_name: str, customer_id: str) -> User | None:
    """
    Provision a Customer login for a customer seen for the first time.

    Username is the mapped customer name and the initial password is the
    customer id. Returns the new user, or None when the username already
    exists. Does not commit; the caller saves it together with the record.
    """
    username = to_username(customer_name)
    if not username or find_by_username(username):
        return None
    user = User(username=username, password=customer_id, role=Role.CUSTOMER.value)
    db.session.add(user)
    db.session.flush()
    return user


def access_label(user: User) -> str:
    return "Full Access" if user.is_admin else "View Only"
