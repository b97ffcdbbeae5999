# Overview: Service-layer operations for sale records; the in-memory record store and save path.

"""
Record Store + save path

The store itself is list/upsert/delete over the sale_records table. The save
path sits on top of it and is the only place new records are made:

NEW RECORD:
- customer_id is derived from the customer name (existing name -> its id)
- product_id is derived from the customer and product names
- total_amount is recomputed; a client-supplied total is never trusted
- discount is stored as a fraction of the entered whole percent
- a fresh id is minted from the wall clock
- a Customer login is provisioned the first time a customer name is seen

EDIT:
- full replacement of the stored record; customer name, customer id and
  product id are kept from the stored record
- editing an id that does not exist changes nothing

Derivations run on a snapshot of the store (list of dicts), never on live
rows.
"""

from __future__ import annotations

import math
import time

from ..extensions import db
from ..models import SaleRecord, User
from ..time_utils import current_time_str, today_str
from ..validation import ValidationError
from . import identifier_service, pricing_service, user_service


def list_records() -> list[dict]:
    """Snapshot of every record, in insertion order."""
    rows = db.session.query(SaleRecord).order_by(SaleRecord.id).all()
    return [row.to_dict() for row in rows]


def get_record(record_id: int) -> SaleRecord | None:
    return db.session.get(SaleRecord, record_id)


def mint_record_id(now_ms: int | None = None) -> int:
    """
    Wall-clock id in milliseconds, bumped past the current maximum.

    Two saves in the same millisecond (or a clock running behind the
    seeded ids) still get distinct, increasing ids.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    current_max = db.session.query(db.func.max(SaleRecord.id)).scalar() or 0
    return max(now_ms, current_max + 1)


def upsert_record(data: dict, *, commit: bool = True) -> SaleRecord:
    """
    Insert or fully replace a record by id.

    Every column is taken from data; missing optional columns reset to
    their defaults (records are never partially patched).
    """
    if data.get("id") is None:
        raise ValidationError("id is required")
    record = get_record(data["id"])
    if record is None:
        record = SaleRecord(id=data["id"])
        db.session.add(record)

    record.date = data["date"]
    record.time = data["time"]
    record.customer_id = data["customer_id"]
    record.customer_name = data["customer_name"]
    record.product_name = data["product_name"]
    record.product_id = data["product_id"]
    record.salesperson = data["salesperson"]
    record.region = data["region"]
    record.quantity = data.get("quantity", 0)
    record.unit_price = data.get("unit_price", 0)
    record.discount = data.get("discount", 0)
    record.total_amount = data.get("total_amount", 0)
    record.image = data.get("image")

    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return record


def delete_record(record_id: int) -> bool:
    """Delete by id. Missing ids are a no-op; returns whether a row was removed."""
    record = get_record(record_id)
    if not record:
        return False
    db.session.delete(record)
    db.session.commit()
    return True


def _total(quantity, unit_price, discount_percent) -> float:
    total = float(pricing_service.compute_total(quantity, unit_price, discount_percent))
    if not math.isfinite(total):
        raise ValidationError("total_amount is too large; lower quantity or unit_price")
    return total


def _priced(fields: dict) -> dict:
    quantity = fields.get("quantity", 0)
    unit_price = fields.get("unit_price", 0)
    discount_percent = fields.get("discount_percent", 0)
    return {
        "quantity": quantity,
        "unit_price": unit_price,
        "discount": pricing_service.percent_to_fraction(discount_percent),
        "total_amount": _total(quantity, unit_price, discount_percent),
    }


def preview(customer_name: str | None, product_name: str | None, quantity=None, unit_price=None,
            discount_percent=None) -> dict:
    """
    What the save path would derive for a new record, without saving.

    Mirrors the read-only fields of the add-record form. Raises
    ValidationError when the total overflows a float.
    """
    snapshot = list_records()
    return {
        "customer_id": identifier_service.next_customer_id(snapshot, customer_name),
        "product_id": identifier_service.next_product_id(snapshot, customer_name, product_name),
        "discount_percent": pricing_service.clamp_discount_percent(discount_percent),
        "total_amount": _total(quantity, unit_price, discount_percent),
    }


def create_record(fields: dict) -> tuple[SaleRecord, User | None]:
    """
    Save a brand-new record from validated form fields.

    Returns (record, provisioned_user); provisioned_user is None when the
    customer already had a login.
    """
    snapshot = list_records()
    customer_name = fields["customer_name"]
    product_name = fields["product_name"]

    customer_id = identifier_service.next_customer_id(snapshot, customer_name)
    if not customer_id:
        raise ValidationError("customer_name cannot be blank")
    product_id = identifier_service.next_product_id(snapshot, customer_name, product_name)
    if not product_id:
        raise ValidationError(
            "customer_name needs at least 3 characters and product_name at least 2 to generate a product id"
        )

    data = {
        "id": mint_record_id(),
        "date": fields.get("date") or today_str(),
        "time": fields.get("time") or current_time_str(),
        "customer_id": customer_id,
        "customer_name": customer_name,
        "product_name": product_name,
        "product_id": product_id,
        "salesperson": fields["salesperson"],
        "region": fields["region"],
        "image": fields.get("image"),
        **_priced(fields),
    }
    record = upsert_record(data, commit=False)
    user = user_service.ensure_customer_user(customer_name, customer_id)
    db.session.commit()
    return record, user


def update_record(record_id: int, fields: dict) -> SaleRecord | None:
    """
    Replace an existing record from validated form fields.

    Values not sent keep the stored record's value, as the edit form is
    pre-filled with them. Returns None (and changes nothing) when the id
    does not exist.
    """
    existing = get_record(record_id)
    if existing is None:
        return None
    current = existing.to_dict()

    merged = {
        "date": current["date"],
        "time": current["time"],
        "product_name": current["product_name"],
        "salesperson": current["salesperson"],
        "region": current["region"],
        "quantity": current["quantity"],
        "unit_price": current["unit_price"],
        "discount_percent": pricing_service.fraction_to_percent(current["discount"]),
        "image": current.get("image"),
    }
    merged.update({k: v for k, v in fields.items() if k != "customer_name"})

    data = {
        "id": record_id,
        "date": merged["date"],
        "time": merged["time"],
        "customer_id": current["customer_id"],
        "customer_name": current["customer_name"],
        "product_name": merged["product_name"],
        "product_id": current["product_id"],
        "salesperson": merged["salesperson"],
        "region": merged["region"],
        "image": merged["image"],
        **_priced(merged),
    }
    return upsert_record(data)


def form_values(record: SaleRecord) -> dict:
    """Record as the edit form shows it: discount as a whole percent."""
    data = record.to_dict()
    data["discount_percent"] = pricing_service.fraction_to_percent(record.discount)
    data.setdefault("image", None)
    return data
