"""Range filtering, column discovery and field projection."""

import copy

import pytest

from salesboard.seed import INITIAL_SALE_RECORDS
from salesboard.services import view_service


@pytest.fixture
def records():
    return copy.deepcopy(INITIAL_SALE_RECORDS)


class TestFilterByRange:
    def test_no_bounds_keeps_everything(self, records):
        assert view_service.filter_by_range(records) == records

    def test_date_from_is_inclusive(self, records):
        result = view_service.filter_by_range(records, date_from="2023-10-27")
        assert [r["id"] for r in result] == [2, 3]

    def test_date_to_is_inclusive(self, records):
        result = view_service.filter_by_range(records, date_to="2023-10-26")
        assert [r["id"] for r in result] == [1]

    def test_time_bounds(self, records):
        result = view_service.filter_by_range(records, time_from="09:15", time_to="13:45")
        assert [r["id"] for r in result] == [2, 3]

    def test_all_bounds_together(self, records):
        result = view_service.filter_by_range(
            records, date_from="2023-10-27", date_to="2023-10-27", time_from="10:00", time_to="23:59"
        )
        assert [r["id"] for r in result] == [3]

    def test_empty_strings_are_no_bound(self, records):
        assert view_service.filter_by_range(records, "", "", "", "") == records

    def test_empty_result_is_valid(self, records):
        assert view_service.filter_by_range(records, date_from="2024-01-01") == []

    def test_inputs_are_not_mutated(self, records):
        before = copy.deepcopy(records)
        view_service.filter_by_range(records, date_from="2023-10-27")
        assert records == before


class TestColumns:
    def test_columns_come_from_first_record_without_id(self, records):
        columns = view_service.derive_columns(records)
        assert "id" not in columns
        assert columns[:3] == ["date", "time", "customer_id"]
        assert columns[-1] == "total_amount"

    def test_image_column_only_when_first_record_has_one(self, records):
        assert "image" not in view_service.derive_columns(records)
        records[0]["image"] = "https://img.example/arc.png"
        assert view_service.derive_columns(records)[-1] == "image"

    def test_empty_collection_has_no_columns(self):
        assert view_service.derive_columns([]) == []
        assert view_service.default_visibility(view_service.derive_columns([])) == {}

    def test_default_visibility_shows_everything(self, records):
        visibility = view_service.default_visibility(view_service.derive_columns(records))
        assert all(visibility.values())
        assert "id" not in visibility


class TestProject:
    def test_only_flagged_fields(self, records):
        projected = view_service.project(records[0], {"date": True, "total_amount": True})
        assert projected == {"date": "2023-10-26", "total_amount": 450000}

    def test_hidden_flags_are_dropped(self, records):
        projected = view_service.project(records[0], {"date": True, "region": False, "discount": False})
        assert list(projected) == ["date"]

    def test_id_never_appears(self, records):
        projected = view_service.project(records[0], {"id": True, "date": True})
        assert "id" not in projected

    def test_fields_the_record_lacks_are_skipped(self, records):
        projected = view_service.project(records[0], {"image": True, "region": True})
        assert projected == {"region": "North America"}

    def test_order_follows_visibility_map(self, records):
        projected = view_service.project(records[0], {"total_amount": True, "date": True})
        assert list(projected) == ["total_amount", "date"]

    def test_visible_headers(self):
        assert view_service.visible_headers({"date": True, "id": True, "region": False, "time": True}) == [
            "date", "time",
        ]


class TestToggleField:
    def test_flips_and_returns_new_map(self):
        original = {"date": True, "region": False}
        toggled = view_service.toggle_field(original, "region")
        assert toggled == {"date": True, "region": True}
        assert original == {"date": True, "region": False}

    def test_missing_field_counts_as_hidden(self):
        assert view_service.toggle_field({"date": True}, "image") == {"date": True, "image": True}

    def test_id_is_not_toggleable(self):
        with pytest.raises(ValueError):
            view_service.toggle_field({}, "id")


class TestCustomerRecords:
    def test_matches_mapped_username(self, records):
        result = view_service.records_for_customer(records, "STARKINDUSTRIES")
        assert [r["id"] for r in result] == [1, 3]

    def test_unknown_user_sees_nothing(self, records):
        assert view_service.records_for_customer(records, "admin") == []


class TestLabelsAndPicker:
    @pytest.mark.parametrize("field,label", [
        ("customer_id", "Customer Id"),
        ("total_amount", "Total Amount"),
        ("date", "Date"),
    ])
    def test_format_header(self, field, label):
        assert view_service.format_header(field) == label

    def test_existing_customers_first_id_wins_sorted_by_name(self, records):
        records.append({"customer_name": "acme", "customer_id": "CIACMEX001"})
        records.append({"customer_name": "Stark Industries", "customer_id": "CISTARK002"})
        assert view_service.existing_customers(records) == [
            {"name": "acme", "id": "CIACMEX001"},
            {"name": "Stark Industries", "id": "CISTARK001"},
            {"name": "Wayne Enterprises", "id": "CIWAYNE001"},
        ]
