# Overview: Service-layer operations for identifier; derives customer and product ids.

"""
Identifier Service - human-readable sequential ids without a sequence table

Ids are a name-derived prefix followed by a running counter. The counter is
found by scanning the existing records for ids with the same prefix and
taking the largest numeric suffix; freed numbers are never reused.

FORMATS:
- Product id: first 3 chars of the customer name + first 2 chars of the
  product name, uppercased, then the counter unpadded ("STAAR4")
- Customer id: "CI" + first 5 alphanumerics of the customer name, padded
  with "X", then the counter zero-padded to 3 digits ("CIANNBX001")

Both padding rules are part of the id format and differ on purpose.

All functions take record snapshots (dicts from SaleRecord.to_dict()) and
never touch the database.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping


CUSTOMER_PREFIX = "CI"
CUSTOMER_NAME_CHARS = 5
CUSTOMER_PAD_CHAR = "X"
CUSTOMER_COUNTER_WIDTH = 3

PRODUCT_CUSTOMER_CHARS = 3
PRODUCT_NAME_CHARS = 2

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")


def parse_suffix(value: str) -> int | None:
    """
    Leniently parse the counter after an id prefix.

    Leading whitespace and a sign are accepted and anything after the
    leading digits is ignored ("12A" -> 12). Returns None when there are no
    leading digits at all ("X", "").
    """
    match = _LEADING_INT_RE.match(value)
    if not match:
        return None
    return int(match.group(1))


def max_suffix(values: Iterable[str], prefix: str) -> int:
    """Largest parsed suffix among values starting with prefix; 0 when none parse."""
    max_index = 0
    for value in values:
        if not value or not value.startswith(prefix):
            continue
        index = parse_suffix(value[len(prefix):])
        if index is not None and index > max_index:
            max_index = index
    return max_index


def product_prefix(customer_name: str | None, product_name: str | None) -> str:
    """Product id prefix, or "" when the names are too short to derive one."""
    customer = (customer_name or "").strip().upper()
    product = (product_name or "").strip().upper()
    if len(customer) < PRODUCT_CUSTOMER_CHARS or len(product) < PRODUCT_NAME_CHARS:
        return ""
    return customer[:PRODUCT_CUSTOMER_CHARS] + product[:PRODUCT_NAME_CHARS]


def customer_prefix(customer_name: str | None) -> str:
    """Customer id prefix for a name not seen before, or "" for a blank name."""
    name = (customer_name or "").strip().upper()
    if not name:
        return ""
    alnum = _NON_ALNUM_RE.sub("", name)[:CUSTOMER_NAME_CHARS]
    return CUSTOMER_PREFIX + alnum.ljust(CUSTOMER_NAME_CHARS, CUSTOMER_PAD_CHAR)


def next_product_id(
    existing_records: Iterable[Mapping],
    customer_name: str | None,
    product_name: str | None,
) -> str:
    """
    Next product id for this customer/product pair.

    Returns "" when the customer name is shorter than 3 characters or the
    product name shorter than 2 (after trimming); callers must not save a
    record with an empty product id.
    """
    prefix = product_prefix(customer_name, product_name)
    if not prefix:
        return ""
    max_index = max_suffix((r.get("product_id") or "" for r in existing_records), prefix)
    return f"{prefix}{max_index + 1}"


def find_customer_id(existing_records: Iterable[Mapping], customer_name: str | None) -> str | None:
    """customer_id of the first record whose customer name matches case-insensitively."""
    name = (customer_name or "").strip().upper()
    if not name:
        return None
    for record in existing_records:
        if (record.get("customer_name") or "").upper() == name:
            return record.get("customer_id")
    return None


def next_customer_id(existing_records: Iterable[Mapping], customer_name: str | None) -> str:
    """
    Customer id for a customer name.

    A name already present in the records (any case) keeps its existing id,
    so one customer always maps to one id. New names get the next id in
    their prefix sequence.
    """
    records = list(existing_records)
    if not (customer_name or "").strip():
        return ""

    existing = find_customer_id(records, customer_name)
    if existing is not None:
        return existing

    prefix = customer_prefix(customer_name)
    max_index = max_suffix((r.get("customer_id") or "" for r in records), prefix)
    return f"{prefix}{max_index + 1:0{CUSTOMER_COUNTER_WIDTH}d}"
