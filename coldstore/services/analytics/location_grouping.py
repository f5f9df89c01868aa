# coldstore/services/analytics/location_grouping.py
"""
Chamber -> floor -> order-row drill-down over incoming gate passes.

Every bag-size line lands in exactly one (chamber, floor) bucket. A blank
chamber or floor (after trimming) goes to the "(No chamber)" / "(No floor)"
bucket, so grouped sums always equal the ungrouped sum.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from coldstore.models.gate_pass_models import BagSize, GatePass
from coldstore.services.api_client import ApiInputError

NO_CHAMBER = "(No chamber)"
NO_FLOOR = "(No floor)"

QUANTITY_FIELDS = ("current", "initial")

PassLike = Union[GatePass, Dict[str, Any]]


@dataclass
class LocationGroup:
    label: str
    quantity: int = 0
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OrderRow:
    gatePassId: str
    gatePassNo: int
    date: str
    farmerName: str
    accountNumber: Optional[int]
    variety: str
    size: str
    row: str
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# -----------------------------
# helpers
# -----------------------------
def _as_pass(p: PassLike) -> GatePass:
    return p if isinstance(p, GatePass) else GatePass.model_validate(p)


def _check_field(quantity_field: str) -> None:
    if quantity_field not in QUANTITY_FIELDS:
        raise ApiInputError(f"quantity_field must be one of {QUANTITY_FIELDS}, got {quantity_field!r}")


def chamber_label(bag: BagSize) -> str:
    return bag.location.chamber.strip() or NO_CHAMBER


def floor_label(bag: BagSize) -> str:
    return bag.location.floor.strip() or NO_FLOOR


def bag_quantity(bag: BagSize, quantity_field: str) -> int:
    return bag.currentQuantity if quantity_field == "current" else bag.initialQuantity


def iter_entries(passes: Iterable[PassLike]) -> Iterator[Tuple[GatePass, BagSize]]:
    for raw in passes:
        gp = _as_pass(raw)
        for bag in gp.bagSizes:
            yield gp, bag


def _grouped(entries: Iterable[Tuple[GatePass, BagSize]], label_of, quantity_field: str) -> List[LocationGroup]:
    groups: Dict[str, LocationGroup] = {}
    for _, bag in entries:
        label = label_of(bag)
        g = groups.setdefault(label, LocationGroup(label=label))
        g.quantity += bag_quantity(bag, quantity_field)
        g.count += 1
    return [groups[k] for k in sorted(groups)]


# -----------------------------
# drill-down stages
# -----------------------------
def group_by_chamber(passes: Iterable[PassLike], quantity_field: str = "current") -> List[LocationGroup]:
    _check_field(quantity_field)
    return _grouped(iter_entries(passes), chamber_label, quantity_field)


def group_by_floor(passes: Iterable[PassLike], chamber: str, quantity_field: str = "current") -> List[LocationGroup]:
    _check_field(quantity_field)
    chamber = (chamber or "").strip()
    entries = (e for e in iter_entries(passes) if chamber_label(e[1]) == chamber)
    return _grouped(entries, floor_label, quantity_field)


def order_rows(
    passes: Iterable[PassLike],
    chamber: str,
    floor: str,
    quantity_field: str = "current",
) -> List[OrderRow]:
    """One row per gate pass x bag size stored on the given chamber and floor, in input order."""
    _check_field(quantity_field)
    chamber, floor = (chamber or "").strip(), (floor or "").strip()
    rows: List[OrderRow] = []
    for gp, bag in iter_entries(passes):
        if chamber_label(bag) != chamber or floor_label(bag) != floor:
            continue
        rows.append(
            OrderRow(
                gatePassId=gp.id,
                gatePassNo=gp.gatePassNo,
                date=gp.date,
                farmerName=gp.farmer_name,
                accountNumber=gp.account_number,
                variety=gp.variety or "",
                size=bag.name,
                row=bag.location.row.strip(),
                quantity=bag_quantity(bag, quantity_field),
            )
        )
    return rows


def total_quantity(passes: Iterable[PassLike], quantity_field: str = "current") -> int:
    _check_field(quantity_field)
    return sum(bag_quantity(bag, quantity_field) for _, bag in iter_entries(passes))
