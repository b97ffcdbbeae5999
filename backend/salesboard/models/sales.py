from __future__ import annotations

from ..extensions import db


# Snapshot field order; the dashboard derives its columns from this shape.
RECORD_FIELDS = (
    "id",
    "date",
    "time",
    "customer_id",
    "customer_name",
    "product_name",
    "product_id",
    "salesperson",
    "region",
    "quantity",
    "unit_price",
    "discount",
    "total_amount",
)

# Fields an administrator can show or hide; id never is one
CONFIGURABLE_FIELDS = RECORD_FIELDS[1:] + ("image",)


class SaleRecord(db.Model):
    """
    One sale transaction line.

    Records are replaced in full on edit and deleted by id, never patched.
    `discount` is stored as a fraction (0.1 == 10%); forms work in whole
    percentages and convert exactly once in each direction.
    """
    __tablename__ = "sale_records"
    __table_args__ = (
        db.Index("ix_sale_records_date_time", "date", "time"),
    )

    # Minted by the save path, not by the database
    id = db.Column(db.Integer, primary_key=True, autoincrement=False)

    date = db.Column(db.String(10), nullable=False, index=True)   # YYYY-MM-DD
    time = db.Column(db.String(5), nullable=False)                # HH:MM

    customer_id = db.Column(db.String(64), nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=False)
    product_name = db.Column(db.String(255), nullable=False)
    product_id = db.Column(db.String(64), nullable=False, index=True)
    salesperson = db.Column(db.String(255), nullable=False)
    region = db.Column(db.String(255), nullable=False)

    quantity = db.Column(db.Integer, nullable=False, default=0)
    unit_price = db.Column(db.Float, nullable=False, default=0)
    discount = db.Column(db.Float, nullable=False, default=0)
    total_amount = db.Column(db.Float, nullable=False, default=0)

    # Opaque reference (URL); never interpreted
    image = db.Column(db.Text, nullable=True)

    def to_dict(self) -> dict:
        data = {field: getattr(self, field) for field in RECORD_FIELDS}
        # Records without an image carry no image key at all
        if self.image:
            data["image"] = self.image
        return data
