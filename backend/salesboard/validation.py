from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .models import CONFIGURABLE_FIELDS
from .time_utils import is_hhmm, is_iso_date


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate username)."""


@dataclass(frozen=True)
class RecordPayloadPolicy:
    """
    What clients may send when saving a sale record.

    - writable_fields: values the save path uses
    - derived_fields: accepted (so a client can send back a record it
      fetched) but ignored; the save path derives them itself
    - required_on_create: text fields that must be present and non-blank
    """
    writable_fields: set[str]
    derived_fields: set[str] = field(default_factory=set)
    required_on_create: set[str] = field(default_factory=set)


RECORD_POLICY = RecordPayloadPolicy(
    writable_fields={
        "date", "time", "customer_name", "product_name", "salesperson",
        "region", "quantity", "unit_price", "discount_percent", "image",
    },
    derived_fields={"id", "customer_id", "product_id", "total_amount"},
    required_on_create={"customer_name", "product_name", "salesperson", "region"},
)

# Text fields that are required whenever they are sent
REQUIRED_TEXT_FIELDS = {"product_name", "salesperson", "region"}

# Largest quantity the store can hold (signed 64-bit)
MAX_QUANTITY = 2 ** 63 - 1


def _coerce_int(key: str, value: Any) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        if 'e' in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        if '.' in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def _coerce_number(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValidationError(f"{key} must be a number")
    else:
        raise ValidationError(f"{key} must be a number")
    if number != number or number in (float("inf"), float("-inf")):
        raise ValidationError(f"{key} must be a finite number")
    return number


def validate_record_payload(payload: Any, *, creating: bool, policy: RecordPayloadPolicy = RECORD_POLICY) -> dict:
    """
    Validates + normalizes a sale record body.

    Returns a cleaned dict with only writable fields. Derived fields are
    dropped. The discount is taken as a whole-number percentage
    (discount_percent) and left unclamped here; the pricing service clamps
    it. A fractional "discount" is rejected so it cannot be scaled twice.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    for key in payload.keys():
        if key == "discount":
            raise ValidationError("Send discount_percent (whole percent, 0-25), not discount")
        if key not in policy.writable_fields and key not in policy.derived_fields:
            raise ValidationError(f"Field not allowed: {key}")

    if creating:
        missing = sorted(
            k for k in policy.required_on_create
            if not isinstance(payload.get(k), str) or not payload.get(k).strip()
        )
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cleaned: dict = {}
    for key, raw in payload.items():
        if key in policy.derived_fields:
            continue

        if key == "image":
            cleaned[key] = (str(raw).strip() or None) if raw is not None else None
            continue

        if raw is None:
            if key in ("date", "time", "discount_percent"):
                continue
            raise ValidationError(f"{key} cannot be null")

        if key == "date":
            value = str(raw).strip()
            if value and not is_iso_date(value):
                raise ValidationError("date must be YYYY-MM-DD")
            if value:
                cleaned[key] = value
        elif key == "time":
            value = str(raw).strip()
            if value and not is_hhmm(value):
                raise ValidationError("time must be HH:MM (24-hour)")
            if value:
                cleaned[key] = value
        elif key == "quantity":
            quantity = _coerce_int(key, raw)
            if quantity < 0:
                raise ValidationError("quantity must be >= 0")
            if quantity > MAX_QUANTITY:
                raise ValidationError(f"quantity must be <= {MAX_QUANTITY}")
            cleaned[key] = quantity
        elif key == "unit_price":
            price = _coerce_number(key, raw)
            if price < 0:
                raise ValidationError("unit_price must be >= 0")
            cleaned[key] = price
        elif key == "discount_percent":
            # Lenient by contract: non-numeric means 0, out of range is clamped
            cleaned[key] = raw
        else:
            value = str(raw).strip()
            if not value and key in REQUIRED_TEXT_FIELDS | {"customer_name"}:
                raise ValidationError(f"{key} cannot be blank")
            cleaned[key] = value

    return cleaned


def validate_range_args(args) -> dict:
    """
    date_from/date_to/time_from/time_to query arguments.

    Empty values mean "no bound". Returns a dict with all four keys.
    """
    bounds = {}
    for key in ("date_from", "date_to"):
        value = (args.get(key) or "").strip()
        if value and not is_iso_date(value):
            raise ValidationError(f"{key} must be YYYY-MM-DD")
        bounds[key] = value or None
    for key in ("time_from", "time_to"):
        value = (args.get(key) or "").strip()
        if value and not is_hhmm(value):
            raise ValidationError(f"{key} must be HH:MM (24-hour)")
        bounds[key] = value or None
    return bounds


def validate_visibility_field(name: Any) -> str:
    """A record field that can be shown or hidden (any record field except id)."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("field names must be non-empty strings")
    if name == "id":
        raise ValidationError("id is not a configurable field")
    if name not in CONFIGURABLE_FIELDS:
        raise ValidationError(f"Unknown field: {name}")
    return name


def validate_visibility_map(payload: Any) -> dict[str, bool]:
    """Field -> bool map over configurable record fields; every value must be a bool."""
    if not isinstance(payload, dict):
        raise ValidationError("visibility must be an object of field -> boolean")
    cleaned: dict[str, bool] = {}
    for key, value in payload.items():
        validate_visibility_field(key)
        if not isinstance(value, bool):
            raise ValidationError(f"{key} must be true or false")
        cleaned[key] = value
    return cleaned
