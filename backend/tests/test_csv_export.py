"""
OrderDesk Backend - CSV Serialization Unit Tests
================================================

What we test:
    ✅ Formula-prefixed cells are neutralized with a leading quote
    ✅ Embedded quotes are doubled and survive a csv-module parse
    ✅ Header from the first row's keys, "\n" line joins, no trailing newline
    ✅ Deterministic output for unchanged input
    ✅ Value text forms (None, bool, Decimal, datetime, UUID)
    ✅ Export filename dated in UTC
"""

import csv
import io
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from orderdesk.services.csv_export import build_csv, export_filename, render_value, sanitize_cell

from conftest import CUSTOMER_ID


def _row(**overrides):
    row = {
        "order_id": "o-1",
        "customer_id": CUSTOMER_ID,
        "status": "paid",
        "total_amount": Decimal("19.90"),
    }
    row.update(overrides)
    return row


class TestSanitizeCell:

    @pytest.mark.parametrize("value", ["=SUM(A1:A2)", "-2+3", "+1", "@cmd"])
    def test_formula_prefixes_are_neutralized(self, value):
        assert sanitize_cell(value) == f"\"'{value}\""

    def test_plain_values_are_quoted(self):
        assert sanitize_cell("paid") == '"paid"'

    def test_embedded_quotes_are_doubled(self):
        assert sanitize_cell('say "hi"') == '"say ""hi"""'

    def test_none_is_empty(self):
        assert sanitize_cell(None) == '""'

    def test_negative_number_is_neutralized(self):
        assert sanitize_cell(Decimal("-5.00")) == "\"'-5.00\""


class TestRenderValue:

    def test_text_forms(self):
        ident = uuid.UUID(CUSTOMER_ID)
        stamp = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        assert render_value(True) == "true"
        assert render_value(False) == "false"
        assert render_value(Decimal("10.50")) == "10.50"
        assert render_value(stamp) == "2024-05-01T12:30:00+00:00"
        assert render_value(ident) == CUSTOMER_ID


class TestBuildCsv:

    def test_header_and_two_rows(self):
        content = build_csv([_row(order_id="o-1"), _row(order_id="o-2")])
        lines = content.split("\n")
        assert lines[0] == "order_id,customer_id,status,total_amount"
        assert len(lines) == 3
        assert lines[1] == f'"o-1","{CUSTOMER_ID}","paid","19.90"'
        assert not content.endswith("\n")

    def test_round_trips_through_csv_module(self):
        tricky = 'He said "=1+1", then left'
        content = build_csv([_row(status=tricky)])
        parsed = list(csv.reader(io.StringIO(content)))
        assert parsed[1][2] == tricky

    def test_neutralized_value_parses_with_quote_prefix(self):
        content = build_csv([_row(status="=HYPERLINK(\"x\")")])
        parsed = list(csv.reader(io.StringIO(content)))
        assert parsed[1][2] == "'=HYPERLINK(\"x\")"

    def test_output_is_deterministic(self):
        rows = [_row(order_id="o-1"), _row(order_id="o-2", status="@risky")]
        assert build_csv(rows) == build_csv([dict(r) for r in rows])

    def test_missing_key_renders_empty(self):
        rows = [_row(), {"order_id": "o-2"}]
        assert build_csv(rows).split("\n")[2] == '"o-2","","",""'

    def test_empty_input(self):
        assert build_csv([]) == ""


class TestExportFilename:

    def test_uses_utc_date(self):
        local = datetime(2024, 5, 1, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert export_filename(CUSTOMER_ID, local) == f"orders_{CUSTOMER_ID}_2024-05-02.csv"

    def test_naive_datetime_is_taken_as_is(self):
        assert export_filename("abc", datetime(2024, 1, 15, 8)) == "orders_abc_2024-01-15.csv"
