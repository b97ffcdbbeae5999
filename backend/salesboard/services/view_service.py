# Overview: Service-layer operations for record views; range filtering and field projection.

"""
Record view engine.

Filtering and projection over record snapshots (dicts from
SaleRecord.to_dict()). Everything here is pure: inputs are never mutated
and new lists/dicts are returned.

COLUMN DISCOVERY: The set of configurable fields is read from the shape of
the first record, not from a fixed schema. An empty store therefore has no
configurable columns.

RANGE FILTERS: Dates are "YYYY-MM-DD" and times zero-padded "HH:MM", so
plain string comparison is chronological. Bounds are inclusive; a missing
or empty bound does not constrain that side.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from .username_service import to_username


HIDDEN_FIELD = "id"


def filter_by_range(
    records: Iterable[Mapping],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    time_from: Optional[str] = None,
    time_to: Optional[str] = None,
) -> list[Mapping]:
    """Records whose date and time of day fall inside every given bound."""
    result = []
    for record in records:
        if date_from and record["date"] < date_from:
            continue
        if date_to and record["date"] > date_to:
            continue
        if time_from and record["time"] < time_from:
            continue
        if time_to and record["time"] > time_to:
            continue
        result.append(record)
    return result


def derive_columns(records: list[Mapping]) -> list[str]:
    """Field names of the first record, minus id; [] for an empty collection."""
    if not records:
        return []
    return [key for key in records[0].keys() if key != HIDDEN_FIELD]


def visible_headers(visibility: Mapping[str, bool]) -> list[str]:
    """Fields flagged as shown, in map order. id is never a header."""
    return [field for field, shown in visibility.items() if shown and field != HIDDEN_FIELD]


def project(record: Mapping, visibility: Mapping[str, bool]) -> dict:
    """Only the shown fields of a record, names unchanged."""
    return {
        field: record[field]
        for field in visible_headers(visibility)
        if field in record
    }


def project_all(records: Iterable[Mapping], visibility: Mapping[str, bool]) -> list[dict]:
    return [project(record, visibility) for record in records]


def default_visibility(columns: Iterable[str]) -> dict[str, bool]:
    """Every column shown."""
    return {column: True for column in columns if column != HIDDEN_FIELD}


def toggle_field(visibility: Mapping[str, bool], field: str) -> dict[str, bool]:
    """
    New map with one flag flipped.

    A field missing from the map counts as hidden, so toggling it shows it
    (and appends it to the end of the map).
    """
    if field == HIDDEN_FIELD:
        raise ValueError("id is not a configurable field")
    updated = dict(visibility)
    updated[field] = not bool(visibility.get(field, False))
    return updated


def records_for_customer(records: Iterable[Mapping], username: str) -> list[Mapping]:
    """Records whose customer name maps to the given login."""
    return [r for r in records if to_username(r.get("customer_name")) == username]


def format_header(field: str) -> str:
    """Column label: "customer_id" -> "Customer Id"."""
    return " ".join(part[:1].upper() + part[1:] for part in field.split("_") if part)


def existing_customers(records: Iterable[Mapping]) -> list[dict]:
    """
    Distinct customers for the "existing customer" picker.

    The first id seen for a name wins; sorted by name, case-insensitively.
    """
    seen: dict[str, str] = {}
    for record in records:
        name = record.get("customer_name")
        if name not in seen:
            seen[name] = record.get("customer_id")
    customers = [{"name": name, "id": customer_id} for name, customer_id in seen.items()]
    return sorted(customers, key=lambda c: ((c["name"] or "").casefold(), c["name"] or ""))
