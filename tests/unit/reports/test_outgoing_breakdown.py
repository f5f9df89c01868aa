"""
Tests for delivery-slip breakdown rows across the three stored shapes.
"""

from coldstore.services.reports.outgoing_breakdown import (
    BLANK,
    FORMAT_ALLOCATIONS,
    FORMAT_ORDER_DETAILS,
    FORMAT_SNAPSHOTS,
    location_label,
    outgoing_breakdown,
)
from coldstore.models.gate_pass_models import Location


def test_allocations_preferred_and_sorted():
    entry = {
        "type": "DELIVERY",
        "incomingGatePassEntries": [
            {"incomingGatePassId": "665f00000000abcdef", "variety": "Pukhraj",
             "allocations": [{"size": "Seed", "quantityToAllocate": 4}, {"size": " ", "quantityToAllocate": 9}]},
            {"incomingGatePassId": "x", "gatePassNo": 17, "variety": "Jyoti",
             "allocations": [{"size": "Ration", "quantityToAllocate": 6}]},
        ],
        "orderDetails": [{"size": "Seed", "quantityIssued": 99}],
    }
    out = outgoing_breakdown(entry)
    assert out.format == FORMAT_ALLOCATIONS
    assert [(r.size, r.refNo, r.issuedQty) for r in out.rows] == [("Ration", 17, 6), ("Seed", "abcdef", 4)]
    assert out.totalIssued == 10


def test_snapshots_issued_never_negative():
    entry = {
        "type": "DELIVERY",
        "incomingGatePassSnapshots": [
            {"gatePassNo": 3, "variety": "Pukhraj", "bagSizes": [
                {"name": "Seed", "initialQuantity": 50, "currentQuantity": 20, "location": {"chamber": "A", "floor": "1", "row": "2"}},
                {"name": "Goli", "initialQuantity": 5, "currentQuantity": 8},
            ]},
        ],
    }
    out = outgoing_breakdown(entry)
    assert out.format == FORMAT_SNAPSHOTS
    by_size = {r.size: r for r in out.rows}
    assert by_size["Seed"].issuedQty == 30
    assert by_size["Seed"].location == "A-1-2"
    assert by_size["Goli"].issuedQty == 0
    assert out.totalIssued == 30
    assert out.totalAvailable == 28


def test_order_details_fallback():
    entry = {
        "type": "DELIVERY",
        "variety": "Jyoti",
        "orderDetails": [
            {"size": "Seed", "quantityIssued": 7, "quantityAvailable": 3},
            {"size": "Ration", "quantityIssued": 2, "quantityAvailable": None, "incomingGatePassNo": 5},
        ],
    }
    out = outgoing_breakdown(entry)
    assert out.format == FORMAT_ORDER_DETAILS
    assert out.totalIssued == 9
    assert out.totalAvailable == 3
    assert out.rows[0].refNo == BLANK
    assert out.to_dict()["rows"][1]["refNo"] == 5


def test_location_label():
    assert location_label(None) == BLANK
    assert location_label(Location()) == BLANK
    assert location_label(Location(chamber="C", floor="2", row="")) == "C-2-"
