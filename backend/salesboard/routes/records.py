# Overview: Flask API routes for sale record operations; parses input and returns JSON responses.

# backend/salesboard/routes/records.py
"""
Admin sale record routes.

The list endpoint is the admin dashboard table: records filtered by the
date/time range, the column set discovered from the records, this
session's column map and each row projected through it.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth, require_role
from ..models import Role
from ..services import record_service, view_service, visibility_service
from ..validation import ValidationError, validate_range_args, validate_record_payload


records_bp = Blueprint("records", __name__, url_prefix="/api/records")


@records_bp.get("")
@require_auth
@require_role(Role.ADMIN)
def list_records_route():
    """
    Query params (all optional, empty = no bound):
    - date_from, date_to: YYYY-MM-DD, inclusive
    - time_from, time_to: HH:MM, inclusive
    """
    try:
        bounds = validate_range_args(request.args)
        records = record_service.list_records()
        filtered = view_service.filter_by_range(records, **bounds)
        visibility = visibility_service.get_admin_visibility(g.session_token)

        return jsonify({
            "columns": view_service.derive_columns(records),
            "visibility": visibility,
            "headers": [
                {"field": f, "label": view_service.format_header(f)}
                for f in view_service.visible_headers(visibility)
            ],
            "records": filtered,
            "rows": [
                {"id": r["id"], **view_service.project(r, visibility)}
                for r in filtered
            ],
            "count": len(filtered),
            "filters": bounds,
        }), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to list records")
        return jsonify({"error": "Internal server error"}), 500


@records_bp.get("/preview")
@require_auth
@require_role(Role.ADMIN)
def preview_route():
    """
    Derived fields of the add-record form for the current input.

    Query params: customer_name, product_name, quantity, unit_price,
    discount_percent.
    """
    args = request.args
    try:
        derived = record_service.preview(
            args.get("customer_name"),
            args.get("product_name"),
            quantity=args.get("quantity"),
            unit_price=args.get("unit_price"),
            discount_percent=args.get("discount_percent"),
        )
        return jsonify(derived), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@records_bp.get("/customers")
@require_auth
@require_role(Role.ADMIN)
def customers_route():
    customers = view_service.existing_customers(record_service.list_records())
    return jsonify({"customers": customers, "count": len(customers)}), 200


@records_bp.get("/<int:record_id>")
@require_auth
@require_role(Role.ADMIN)
def get_record_route(record_id: int):
    record = record_service.get_record(record_id)
    if not record:
        return jsonify({"error": "Record not found"}), 404
    return jsonify({"record": record_service.form_values(record)}), 200


@records_bp.post("")
@require_auth
@require_role(Role.ADMIN)
def create_record_route():
    """
    Save a new record.

    customer_id, product_id and total_amount are derived; the discount is
    sent as discount_percent (0-25). Date and time default to now.
    """
    try:
        fields = validate_record_payload(request.get_json(silent=True), creating=True)
        record, user = record_service.create_record(fields)

        if user:
            current_app.logger.info("Provisioned customer login %s", user.username)

        return jsonify({
            "record": record.to_dict(),
            "created_user": user.to_dict() if user else None,
        }), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create record")
        return jsonify({"error": "Internal server error"}), 500


@records_bp.put("/<int:record_id>")
@require_auth
@require_role(Role.ADMIN)
def update_record_route(record_id: int):
    """Replace a record. Customer name/id and product id stay as stored."""
    try:
        fields = validate_record_payload(request.get_json(silent=True), creating=False)
        record = record_service.update_record(record_id, fields)

        if not record:
            return jsonify({"error": "Record not found"}), 404

        return jsonify({"record": record.to_dict()}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update record")
        return jsonify({"error": "Internal server error"}), 500


@records_bp.delete("/<int:record_id>")
@require_auth
@require_role(Role.ADMIN)
def delete_record_route(record_id: int):
    """Deleting a missing id is a no-op."""
    try:
        record_service.delete_record(record_id)
        return "", 204
    except Exception:
        current_app.logger.exception("Failed to delete record")
        return jsonify({"error": "Internal server error"}), 500
