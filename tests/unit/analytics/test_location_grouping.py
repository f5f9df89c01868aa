"""
Tests for the chamber -> floor -> row drill-down.
"""

import pytest

from coldstore.services.analytics.location_grouping import (
    NO_CHAMBER,
    NO_FLOOR,
    group_by_chamber,
    group_by_floor,
    order_rows,
    total_quantity,
)
from coldstore.services.api_client import ApiInputError


@pytest.fixture
def passes(make_receipt):
    return [
        make_receipt(1, "2024-01-01T00:00:00.000Z", [
            ("Ration", 100, 80, ("A", "1", "R1")),
            ("Seed", 40, 40, ("A", "2", "R3")),
        ]),
        make_receipt(2, "2024-01-02T00:00:00.000Z", [
            ("Ration", 30, 10, ("B", "1", "R2")),
            ("Goli", 20, 20, ("  ", "1", "R9")),
        ], farmer="Sita", account=7),
        make_receipt(3, "2024-01-03T00:00:00.000Z", [
            ("Seed", 15, 5, ("A", "", "R4")),
        ]),
    ]


class TestGroupByChamber:
    def test_groups_sorted_with_sentinel(self, passes):
        groups = group_by_chamber(passes)
        assert [g.label for g in groups] == sorted(["A", "B", NO_CHAMBER])

    def test_blank_chamber_goes_to_sentinel(self, passes):
        by_label = {g.label: g for g in group_by_chamber(passes)}
        assert by_label[NO_CHAMBER].quantity == 20
        assert by_label[NO_CHAMBER].count == 1

    @pytest.mark.parametrize("field", ["current", "initial"])
    def test_grouped_sum_equals_ungrouped(self, passes, field):
        groups = group_by_chamber(passes, field)
        assert sum(g.quantity for g in groups) == total_quantity(passes, field)
        assert sum(g.count for g in groups) == 5

    def test_invalid_field_rejected(self, passes):
        with pytest.raises(ApiInputError):
            group_by_chamber(passes, "outgoing")


class TestGroupByFloor:
    def test_floors_of_chamber(self, passes):
        floors = {g.label: g.quantity for g in group_by_floor(passes, "A")}
        assert floors == {"1": 80, "2": 40, NO_FLOOR: 5}

    @pytest.mark.parametrize("field", ["current", "initial"])
    def test_floor_sums_match_chamber(self, passes, field):
        chamber = {g.label: g.quantity for g in group_by_chamber(passes, field)}
        for label, qty in chamber.items():
            assert sum(g.quantity for g in group_by_floor(passes, label, field)) == qty

    def test_unknown_chamber_is_empty(self, passes):
        assert group_by_floor(passes, "Z") == []


class TestOrderRows:
    def test_rows_for_chamber_and_floor(self, passes):
        rows = order_rows(passes, "A", "1", "initial")
        assert len(rows) == 1
        row = rows[0]
        assert (row.gatePassNo, row.size, row.row, row.quantity) == (1, "Ration", "R1", 100)
        assert row.farmerName == "Mohan"
        assert row.accountNumber == 12

    def test_sentinel_floor_rows(self, passes):
        rows = order_rows(passes, "A", NO_FLOOR)
        assert [r.gatePassNo for r in rows] == [3]

    def test_keeps_input_order(self, make_receipt):
        passes = [
            make_receipt(9, "2024-03-01T00:00:00.000Z", [("Seed", 1, 1, ("C", "1", "x"))]),
            make_receipt(4, "2024-01-01T00:00:00.000Z", [("Seed", 2, 2, ("C", "1", "y"))]),
        ]
        assert [r.gatePassNo for r in order_rows(passes, "C", "1")] == [9, 4]

    def test_to_dict(self, passes):
        d = order_rows(passes, "B", "1")[0].to_dict()
        assert d["farmerName"] == "Sita"
        assert d["quantity"] == 10


class TestMessyInput:
    def test_null_bag_name_still_grouped(self):
        passes = [{"type": "RECEIPT", "gatePassNo": 1, "bagSizes": [
            {"name": None, "initialQuantity": 6, "currentQuantity": None, "location": {"chamber": "A", "floor": "1", "row": "R1"}},
        ]}]
        assert [g.to_dict() for g in group_by_chamber(passes, "initial")] == [{"label": "A", "quantity": 6, "count": 1}]
        assert group_by_chamber(passes, "current")[0].quantity == 0
        assert order_rows(passes, "A", "1")[0].size == ""

    def test_padded_chamber_and_floor_args(self, passes):
        assert {g.label: g.quantity for g in group_by_floor(passes, " A ")} == {"1": 80, "2": 40, NO_FLOOR: 5}
        assert [r.gatePassNo for r in order_rows(passes, "A ", " 1")] == [1]
