# Overview: Service-layer operations for field visibility; admin column and customer view maps.

"""
Field visibility maps

Two independent maps of field name -> shown:
- admin columns: per login session, stored on the session record. It starts
  as "every current column shown", computed once when first read, the same
  way the dashboard initialises its column toggles.
- customer view: one process-wide map configured by administrators; it
  decides what every customer sees.

Map order is column order.
"""

from __future__ import annotations

from ..extensions import db
from ..models import FieldVisibility, SessionToken
from . import record_service, view_service


def get_admin_visibility(session: SessionToken) -> dict[str, bool]:
    if session.column_visibility is None:
        columns = view_service.derive_columns(record_service.list_records())
        session.column_visibility = view_service.default_visibility(columns)
        db.session.commit()
    return dict(session.column_visibility)


def set_admin_visibility(session: SessionToken, visibility: dict[str, bool]) -> dict[str, bool]:
    # Reassign a new dict so the JSON column is flagged dirty
    session.column_visibility = dict(visibility)
    db.session.commit()
    return dict(session.column_visibility)


def toggle_admin_field(session: SessionToken, field: str) -> dict[str, bool]:
    return set_admin_visibility(session, view_service.toggle_field(get_admin_visibility(session), field))


def get_customer_visibility() -> dict[str, bool]:
    rows = db.session.query(FieldVisibility).order_by(FieldVisibility.position, FieldVisibility.id).all()
    return {row.field: row.is_visible for row in rows}


def set_customer_visibility(visibility: dict[str, bool]) -> dict[str, bool]:
    """Replace the whole customer map."""
    db.session.query(FieldVisibility).delete()
    for position, (field, shown) in enumerate(visibility.items()):
        db.session.add(FieldVisibility(field=field, is_visible=bool(shown), position=position))
    db.session.commit()
    return get_customer_visibility()


def toggle_customer_field(field: str) -> dict[str, bool]:
    return set_customer_visibility(view_service.toggle_field(get_customer_visibility(), field))
