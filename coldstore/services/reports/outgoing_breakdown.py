# coldstore/services/reports/outgoing_breakdown.py

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from coldstore.models.gate_pass_models import GatePass, Location

BLANK = "—"

FORMAT_ALLOCATIONS = "allocations"
FORMAT_SNAPSHOTS = "snapshots"
FORMAT_ORDER_DETAILS = "orderDetails"


@dataclass
class BreakdownRow:
    size: str
    variety: str
    refNo: Union[int, str]
    issuedQty: int
    location: Optional[str] = None
    initialQty: Optional[int] = None
    availableQty: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class OutgoingBreakdown:
    format: str
    rows: List[BreakdownRow] = field(default_factory=list)
    totalIssued: int = 0
    totalAvailable: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "rows": [r.to_dict() for r in self.rows],
            "totalIssued": self.totalIssued,
            "totalAvailable": self.totalAvailable,
        }


def location_label(loc: Optional[Location]) -> str:
    """chamber-floor-row, or "—" when nothing is set."""
    if loc is None:
        return BLANK
    s = f"{loc.chamber}-{loc.floor}-{loc.row}"
    return BLANK if not s.strip("-") else s


def _variety(v: Optional[str]) -> str:
    return v.strip() if v is not None else BLANK


def _allocation_rows(gp: GatePass) -> List[BreakdownRow]:
    rows = []
    for ent in gp.incomingGatePassEntries:
        ref = ent.gatePassNo if ent.gatePassNo is not None else (ent.incomingGatePassId[-6:] or BLANK)
        for alloc in ent.allocations:
            size = alloc.size.strip()
            if not size:
                continue
            rows.append(BreakdownRow(size=size, variety=_variety(ent.variety), refNo=ref, issuedQty=alloc.quantityToAllocate))
    return sorted(rows, key=lambda r: (r.size, r.variety))


def _snapshot_rows(gp: GatePass) -> List[BreakdownRow]:
    rows = []
    for snap in gp.incomingGatePassSnapshots:
        for bag in snap.bagSizes:
            size = bag.name.strip()
            if not size:
                continue
            rows.append(
                BreakdownRow(
                    size=size,
                    variety=_variety(snap.variety),
                    refNo=snap.gatePassNo,
                    issuedQty=max(0, bag.initialQuantity - bag.currentQuantity),
                    location=location_label(bag.location),
                    initialQty=bag.initialQuantity,
                    availableQty=bag.currentQuantity,
                )
            )
    return sorted(rows, key=lambda r: (r.size, r.variety, r.location))


def _order_detail_rows(gp: GatePass) -> List[BreakdownRow]:
    return [
        BreakdownRow(
            size=d.size,
            variety=_variety(gp.variety),
            refNo=d.incomingGatePassNo if d.incomingGatePassNo is not None else BLANK,
            issuedQty=d.quantityIssued,
            location=location_label(d.location),
            availableQty=d.quantityAvailable,
        )
        for d in gp.orderDetails
    ]


def outgoing_breakdown(entry: Union[GatePass, Dict[str, Any]]) -> OutgoingBreakdown:
    """
    Issued-quantity rows for a delivery slip.
    Prefers per-voucher allocations, then legacy incoming snapshots, then plain order details.
    """
    gp = entry if isinstance(entry, GatePass) else GatePass.model_validate(entry)

    rows = _allocation_rows(gp)
    if rows:
        return OutgoingBreakdown(FORMAT_ALLOCATIONS, rows, sum(r.issuedQty for r in rows), 0)

    rows = _snapshot_rows(gp)
    if rows:
        return OutgoingBreakdown(
            FORMAT_SNAPSHOTS,
            rows,
            sum(r.issuedQty for r in rows),
            sum(r.availableQty or 0 for r in rows),
        )

    rows = _order_detail_rows(gp)
    return OutgoingBreakdown(
        FORMAT_ORDER_DETAILS,
        rows,
        sum(d.quantityIssued for d in gp.orderDetails),
        sum(d.quantityAvailable for d in gp.orderDetails),
    )
