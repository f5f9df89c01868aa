"""
Tests for the receipt/delivery ledger builder behind the PDF reports.
"""

import pytest

from coldstore.services.reports.ledger_rows import (
    DASH,
    build_delivery_rows,
    build_ledger_rows,
    build_receipt_rows,
    format_pdf_date,
)

SIZES = ["Ration", "Seed"]
LOC = ("A", "1", "R1")


@pytest.fixture
def worked_example(make_receipt, make_delivery):
    receipts = [
        make_receipt(1, "2024-01-01T00:00:00.000Z", [("Ration", 100, 100, LOC)]),
        make_receipt(2, "2024-01-05T00:00:00.000Z", [("Seed", 50, 50, LOC)]),
    ]
    deliveries = [
        make_delivery(11, "2024-01-10T00:00:00.000Z", [("Ration", 60, LOC)]),
        make_delivery(12, "2024-01-15T00:00:00.000Z", [("Seed", 40, LOC)]),
    ]
    return receipts, deliveries


class TestWorkedExample:
    def test_running_totals(self, worked_example):
        receipts, deliveries = worked_example
        ledger = build_ledger_rows(receipts, deliveries, SIZES)
        assert [r.runningTotal for r in ledger.receipt_rows] == [100, 150]
        assert [r.runningTotal for r in ledger.delivery_rows] == [90, 50]

    def test_totals_and_closing(self, worked_example):
        receipts, deliveries = worked_example
        ledger = build_ledger_rows(receipts, deliveries, SIZES)
        assert ledger.total_received == 150
        assert ledger.total_delivered == 100
        assert ledger.opening_balance == 150
        assert ledger.closing_balance == 50
        assert ledger.delivery_rows[-1].runningTotal == ledger.closing_balance

    def test_size_totals(self, worked_example):
        receipts, deliveries = worked_example
        ledger = build_ledger_rows(receipts, deliveries, SIZES)
        assert ledger.receipt_totals_by_size == {"Ration": 100, "Seed": 50}
        assert ledger.delivery_totals_by_size == {"Ration": 60, "Seed": 40}

    def test_input_order_does_not_matter(self, worked_example):
        """Rows are walked chronologically however the API batched them."""
        receipts, deliveries = worked_example
        a = build_ledger_rows(receipts, deliveries, SIZES)
        b = build_ledger_rows(list(reversed(receipts)), list(reversed(deliveries)), SIZES)
        assert [r.to_dict() for r in a.delivery_rows] == [r.to_dict() for r in b.delivery_rows]
        assert a.closing_balance == b.closing_balance

    def test_dates_formatted(self, worked_example):
        receipts, deliveries = worked_example
        ledger = build_ledger_rows(receipts, deliveries, SIZES)
        assert ledger.receipt_rows[0].date == "01/01/24"


class TestReceiptRows:
    def test_one_row_per_location_with_remarks_on_first(self, make_receipt):
        gp = make_receipt(
            5,
            "2024-02-01T00:00:00.000Z",
            [("Ration", 30, 30, ("B", "2", "R1")), ("Seed", 20, 20, ("A", "1", "R7")), ("Ration", 5, 5, ("A", "1", "R7"))],
            remarks="wet bags",
        )
        rows = build_receipt_rows([gp], SIZES)
        assert [(r.chamber, r.row) for r in rows] == [("A", "R7"), ("B", "R1")]
        assert rows[0].sizeQtys == {"Ration": 5, "Seed": 20}
        assert [r.remarks for r in rows] == ["wet bags", DASH]
        assert [r.runningTotal for r in rows] == [25, 55]

    def test_skips_deliveries_and_empty_receipts(self, make_receipt, make_delivery):
        rows = build_receipt_rows(
            [make_receipt(1, "2024-01-01", []), make_delivery(2, "2024-01-02", [("Seed", 1, None)])],
            SIZES,
        )
        assert rows == []

    def test_account_column(self, make_receipt):
        rows = build_receipt_rows([make_receipt(1, "2024-01-01", [("Seed", 1, 1, LOC)], account=44)], SIZES, include_account=True)
        assert rows[0].account == "44"
        assert "account" not in build_receipt_rows([make_receipt(1, "2024-01-01", [("Seed", 1, 1, LOC)])], SIZES)[0].to_dict()


class TestDeliveryRows:
    def test_no_locations_gives_single_dash_row(self, make_delivery):
        gp = make_delivery(8, "2024-03-01T00:00:00.000Z", [("Ration", 10, None), ("Seed", 5, None)])
        rows = build_delivery_rows([gp], SIZES, opening_total=100)
        assert len(rows) == 1
        row = rows[0]
        assert (row.chamber, row.floor, row.row) == (DASH, DASH, DASH)
        assert row.sizeQtys == {"Ration": 10, "Seed": 5}
        assert row.runningTotal == 85

    def test_split_by_location(self, make_delivery):
        gp = make_delivery(8, "2024-03-01", [("Ration", 10, ("B", "1", "x")), ("Seed", 5, ("A", "1", "y"))])
        rows = build_delivery_rows([gp], SIZES, opening_total=20)
        assert [r.chamber for r in rows] == ["A", "B"]
        assert [r.runningTotal for r in rows] == [15, 5]

    def test_undated_sorted_last(self, make_delivery):
        rows = build_delivery_rows(
            [make_delivery(1, None, [("Seed", 1, None)]), make_delivery(2, "2024-01-01", [("Seed", 1, None)])],
            SIZES,
            opening_total=2,
        )
        assert [r.voucher for r in rows] == ["2", "1"]
        assert rows[1].date == DASH

    def test_null_size_still_counted_in_totals(self, make_receipt):
        receipts = [make_receipt(1, "2024-01-01", [("Ration", 10, 10, LOC)])]
        delivery = {
            "type": "DELIVERY", "gatePassNo": 2, "date": "2024-01-02",
            "orderDetails": [{"size": None, "quantityIssued": 3}, {"size": "Ration", "quantityIssued": 2}],
        }
        ledger = build_ledger_rows(receipts, [delivery], SIZES)
        row = ledger.delivery_rows[0]
        assert row.sizeQtys == {"Ration": 2, "Seed": 0}
        assert row.rowTotal == 5
        assert ledger.closing_balance == 5


def test_format_pdf_date():
    assert format_pdf_date("2024-12-31T00:00:00.000Z") == "31/12/24"
    assert format_pdf_date("") == DASH
    assert format_pdf_date("not a date") == DASH
