"""
Harmoniq Safety - Shared Helper Tests
======================================
Tests: Date ranges, CSV safety, pagination, rounding, text validation,
timestamp parsing, entity store
"""

import datetime

import pytest
from tests.conftest import store_count

from harmoniq.common import (
    date_range_bounds, detect_locale, format_date_range, is_valid_email,
    is_within_date_range, paginate, round_half_up, rows_to_csv, sanitize_cell,
    sanitize_text, strip_tags, validate_contact,
)
from harmoniq.db import parse_dt
from harmoniq.errors import ValidationError
from harmoniq.stores.entity_store import EntityStore, is_valid_collection

NOW = datetime.datetime(2026, 3, 31, 15, 30)


# ============================================================================
# DATES
# ============================================================================

class TestDateRanges:

    def test_today(self):
        start, end = date_range_bounds("today", now=NOW)
        assert start == datetime.datetime(2026, 3, 31)
        assert end.date() == datetime.date(2026, 3, 31)
        assert (end.hour, end.minute, end.second) == (23, 59, 59)

    def test_yesterday(self):
        start, end = date_range_bounds("yesterday", now=NOW)
        assert start == datetime.datetime(2026, 3, 30)
        assert end.date() == datetime.date(2026, 3, 30)

    def test_last_30_days(self):
        start, _ = date_range_bounds("last_30_days", now=NOW)
        assert start == datetime.datetime(2026, 3, 1)

    def test_last_6_months_clamps_day(self):
        start, _ = date_range_bounds("last_6_months", now=NOW)
        assert start == datetime.datetime(2025, 9, 30)

    def test_custom_end_covers_whole_day(self):
        start, end = date_range_bounds("custom", "2026-01-01", "2026-01-31", now=NOW)
        assert start == datetime.datetime(2026, 1, 1)
        assert end.date() == datetime.date(2026, 1, 31)
        assert end.hour == 23

    def test_custom_end_with_time_kept(self):
        _, end = date_range_bounds("custom", "2026-01-01", "2026-01-31T08:00:00", now=NOW)
        assert end == datetime.datetime(2026, 1, 31, 8, 0)

    @pytest.mark.parametrize("value,args", [
        ("custom", ("2026-01-01", None)),
        ("custom", ("garbage", "2026-01-31")),
        ("forever", (None, None)),
    ])
    def test_falls_back_to_all_time(self, value, args):
        start, _ = date_range_bounds(value, *args, now=NOW)
        assert start.year == 1970

    def test_is_within(self):
        assert is_within_date_range("2026-03-31T09:00:00", "today", now=NOW)
        assert not is_within_date_range("2026-03-30T09:00:00", "today", now=NOW)
        assert is_within_date_range(None, "all_time", now=NOW)
        assert not is_within_date_range(None, "today", now=NOW)

    def test_format(self):
        assert format_date_range("last_7_days") == "Last 7 days"
        assert format_date_range("custom", "2026-01-01", "2026-01-31") == "2026-01-01 - 2026-01-31"
        assert format_date_range("nonsense") == "All time"


class TestParseDt:

    @pytest.mark.parametrize("value,expected", [
        ("2026-03-02", datetime.datetime(2026, 3, 2)),
        ("2026-03-02 14:05:00", datetime.datetime(2026, 3, 2, 14, 5)),
        ("2026-03-02T14:05:00", datetime.datetime(2026, 3, 2, 14, 5)),
        (datetime.date(2026, 3, 2), datetime.datetime(2026, 3, 2)),
    ])
    def test_formats(self, value, expected):
        assert parse_dt(value) == expected

    def test_utc_suffix(self):
        assert parse_dt("2026-03-02T14:05:00Z") is not None

    @pytest.mark.parametrize("value", [None, "", "yesterday", "2026-13-40"])
    def test_invalid(self, value):
        assert parse_dt(value) is None


# ============================================================================
# CSV
# ============================================================================

class TestCsv:

    @pytest.mark.parametrize("value,expected", [
        ("=SUM(A1:A9)", "'=SUM(A1:A9)"),
        ("+31 6 1234", "'+31 6 1234"),
        ("-5", "'-5"),
        ("@cmd", "'@cmd"),
        ("Normal", "Normal"),
        (None, ""),
        (True, "true"),
        (12.5, "12.5"),
    ])
    def test_sanitize_cell(self, value, expected):
        assert sanitize_cell(value) == expected

    def test_header_union_and_bom(self):
        text = rows_to_csv([{"a": 1, "b": 2}, {"b": 3, "c": "x,y"}])
        assert text.startswith("\ufeff")
        lines = text.lstrip("\ufeff").split("\n")
        assert lines[0] == "a,b,c"
        assert lines[1] == "1,2,"
        assert lines[2] == ',3,"x,y"'

    def test_explicit_headers_without_bom(self):
        assert rows_to_csv([{"a": 1, "b": 2}], headers=["b"], bom=False) == "b\n2"

    def test_empty(self):
        assert rows_to_csv([]) == ""


# ============================================================================
# PAGINATION / NUMBERS
# ============================================================================

class TestPagination:

    def test_pages(self):
        result = paginate(list(range(5)), page=3, per_page=2)
        assert result["items"] == [4]
        assert (result["total"], result["pages"], result["page"]) == (5, 3, 3)

    def test_bad_input_uses_defaults(self):
        result = paginate(list(range(30)), page="x", per_page="y")
        assert result["page"] == 1
        assert result["per_page"] == 25
        assert len(result["items"]) == 25

    def test_per_page_capped(self):
        assert paginate([], per_page=1000)["per_page"] == 100

    def test_empty_has_one_page(self):
        assert paginate([])["pages"] == 1


class TestRounding:

    @pytest.mark.parametrize("value,ndigits,expected", [
        (2.5, 0, 3), (3.5, 0, 4), (0.5, 0, 1), (66.666, 1, 66.7),
    ])
    def test_half_up(self, value, ndigits, expected):
        assert round_half_up(value, ndigits) == pytest.approx(expected)

    def test_integer_result(self):
        assert isinstance(round_half_up(49.5), int)


# ============================================================================
# TEXT
# ============================================================================

class TestText:

    @pytest.mark.parametrize("value,valid", [
        ("a@b.co", True), ("first.last@nexus.com", True),
        ("no-at-sign", False), ("a@b", False), ("a b@c.d", False), ("", False), (None, False),
    ])
    def test_email(self, value, valid):
        assert is_valid_email(value) is valid

    def test_sanitize_text(self):
        assert sanitize_text("  hi\x00there\x07 ") == "hithere"
        assert sanitize_text("x" * 10, 4) == "xxxx"
        assert sanitize_text(None) == ""

    def test_strip_tags(self):
        assert strip_tags("<b>bold</b> move") == "bold move"

    @pytest.mark.parametrize("header,locale", [
        ("sv-SE,sv;q=0.9,en;q=0.8", "sv"),
        ("nl-NL", "nl"),
        ("de-DE,en;q=0.5", "en"),
        (None, "en"),
    ])
    def test_detect_locale(self, header, locale):
        assert detect_locale(header) == locale

    def test_validate_contact(self):
        inquiry = validate_contact({"name": " Ana ", "email": "ana@example.com",
                                    "message": "<p>Demo please</p>"})
        assert inquiry == {"name": "Ana", "email": "ana@example.com", "company": "N/A",
                           "message": "Demo please"}

    def test_validate_contact_truncates_message(self):
        inquiry = validate_contact({"name": "A", "email": "a@b.co", "message": "m" * 900})
        assert len(inquiry["message"]) == 500

    def test_validate_contact_errors(self):
        with pytest.raises(ValidationError, match="required"):
            validate_contact({"name": "A", "email": "a@b.co"})
        with pytest.raises(ValidationError, match="Invalid email"):
            validate_contact({"name": "A", "email": "nope", "message": "hi"})


# ============================================================================
# ENTITY STORE
# ============================================================================

class TestEntityStore:

    def test_collection_shape(self):
        assert is_valid_collection([{"id": "a"}])
        assert is_valid_collection([])
        assert not is_valid_collection({"id": "a"})
        assert not is_valid_collection([{"name": "no id"}])
        assert not is_valid_collection(["a"])

    def test_seed_only_when_empty(self, seeded_db):
        store = EntityStore("scratch", seed=lambda: [{"id": "s-1", "company_id": "c-1", "name": "Seed"}])
        store.clear()
        assert [i["id"] for i in store.load()] == ["s-1"]
        store.add({"id": "s-2", "company_id": "c-2", "name": "Added"})
        assert len(store.load()) == 2
        assert store_count("scratch") == 2
        store.clear()

    def test_invalid_seed_ignored(self, seeded_db):
        store = EntityStore("scratch", seed=[{"name": "missing id"}])
        store.clear()
        assert store.load() == []

    def test_crud(self, seeded_db):
        store = EntityStore("harmoniq_scratch")
        assert store.storage_key == "harmoniq_scratch"
        store.clear()

        item = store.add({"company_id": "c-1", "name": "First"})
        assert item["id"]
        assert item["created_at"] == item["updated_at"]
        store.add({"id": "x-2", "company_id": "c-2", "name": "Second"})

        assert store.get_by_id(item["id"])["name"] == "First"
        assert [i["name"] for i in store.items_for_company("c-2")] == ["Second"]
        assert len(store.items_for_company(None)) == 2
        assert store.find(name="Second")["id"] == "x-2"
        assert store.filter("c-1", name="Second") == []
        assert store.count("c-1") == 1

        updated = store.update("x-2", {"name": "Renamed", "id": "hijack"})
        assert updated["id"] == "x-2"
        assert updated["name"] == "Renamed"
        assert store.update("missing", {"name": "x"}) is None

        assert store.remove("x-2") is True
        assert store.remove("x-2") is False
        assert store.count() == 1
        store.clear()

    def test_replace_all_rejects_bad_collection(self, seeded_db):
        store = EntityStore("scratch")
        store.clear()
        store.add({"id": "keep"})
        assert store.replace_all([{"no": "id"}]) == 0
        assert store.get_by_id("keep") is not None
        store.clear()
