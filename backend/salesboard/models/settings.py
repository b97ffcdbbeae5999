from __future__ import annotations

from ..extensions import db


class FieldVisibility(db.Model):
    """
    Process-wide customer view configuration: one row per record field.

    `position` preserves the order of the map, which is also the column
    order customers see.
    """
    __tablename__ = "field_visibility"
    __table_args__ = (
        db.UniqueConstraint("field", name="uq_field_visibility_field"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    field = db.Column(db.String(64), nullable=False)
    is_visible = db.Column(db.Boolean, nullable=False, default=False)
    position = db.Column(db.Integer, nullable=False, default=0)
