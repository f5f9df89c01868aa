# coldstore/services/reports/ledger_rows.py
"""
Receipt/delivery ledger rows with running balances, for the farmer and
period PDF reports.

Receipts accumulate a forward running total. Deliveries start from the
final receipt total and subtract what each voucher issued. Both lists are
walked in ascending date order (stable for equal dates), so the closing
balance is always total received minus total delivered.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from coldstore.models.common import date_sort_key, parse_api_date
from coldstore.models.gate_pass_models import GatePass, Location

PassLike = Union[GatePass, Dict[str, Any]]

DASH = "-"


@dataclass
class LedgerRow:
    date: str
    voucher: str
    variety: str
    chamber: str
    floor: str
    row: str
    sizeQtys: Dict[str, int]
    rowTotal: int
    runningTotal: int
    remarks: Optional[str] = None
    account: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "date": self.date,
            "voucher": self.voucher,
            "variety": self.variety,
            "chamber": self.chamber,
            "floor": self.floor,
            "row": self.row,
            "sizeQtys": dict(self.sizeQtys),
            "rowTotal": self.rowTotal,
            "runningTotal": self.runningTotal,
        }
        if self.remarks is not None:
            d["remarks"] = self.remarks
        if self.account is not None:
            d["account"] = self.account
        return d


@dataclass
class LedgerRows:
    receipt_rows: List[LedgerRow] = field(default_factory=list)
    delivery_rows: List[LedgerRow] = field(default_factory=list)
    total_received: int = 0
    total_delivered: int = 0
    receipt_totals_by_size: Dict[str, int] = field(default_factory=dict)
    delivery_totals_by_size: Dict[str, int] = field(default_factory=dict)

    @property
    def opening_balance(self) -> int:
        # deliveries table opens with everything received
        return self.total_received

    @property
    def closing_balance(self) -> int:
        return self.total_received - self.total_delivered

    def to_dict(self) -> Dict[str, Any]:
        return {
            "receiptRows": [r.to_dict() for r in self.receipt_rows],
            "deliveryRows": [r.to_dict() for r in self.delivery_rows],
            "totalReceived": self.total_received,
            "totalDelivered": self.total_delivered,
            "openingBalance": self.opening_balance,
            "closingBalance": self.closing_balance,
            "receiptTotalsBySize": dict(self.receipt_totals_by_size),
            "deliveryTotalsBySize": dict(self.delivery_totals_by_size),
        }


# -----------------------------
# helpers
# -----------------------------
def _as_pass(p: PassLike) -> GatePass:
    return p if isinstance(p, GatePass) else GatePass.model_validate(p)


def _utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def chronological(passes: Iterable[GatePass]) -> List[GatePass]:
    return sorted(passes, key=lambda gp: date_sort_key(gp.date))


def format_pdf_date(value: Optional[str]) -> str:
    """ISO date -> dd/mm/yy; "-" when missing."""
    dt = _utc(parse_api_date(value))
    if dt is None:
        return DASH
    return dt.astimezone(timezone.utc).strftime("%d/%m/%y")


def _split_by_location(items: Iterable[Tuple[Optional[Location], str, int]]) -> List[Tuple[Location, List[Tuple[str, int]]]]:
    by_loc: Dict[str, Tuple[Location, List[Tuple[str, int]]]] = {}
    for loc, size, qty in items:
        loc = loc or Location()
        by_loc.setdefault(loc.key(), (loc, []))[1].append((size, qty))
    return [by_loc[k] for k in sorted(by_loc)]


def _size_qtys(size_list: Sequence[Tuple[str, int]], size_columns: Sequence[str]) -> Dict[str, int]:
    return {col: sum(q for s, q in size_list if s == col) for col in size_columns}


def _account(gp: GatePass, include_account: bool) -> Optional[str]:
    if not include_account:
        return None
    acc = gp.account_number
    return "" if acc is None else str(acc)


# -----------------------------
# builders
# -----------------------------
def build_receipt_rows(
    receipts: Iterable[PassLike],
    size_columns: Sequence[str],
    include_account: bool = False,
) -> List[LedgerRow]:
    rows: List[LedgerRow] = []
    running = 0
    for gp in chronological(_as_pass(p) for p in receipts):
        if not gp.is_receipt or not gp.bagSizes:
            continue
        remarks = gp.remarks or DASH
        groups = _split_by_location((b.location, b.name, b.initialQuantity) for b in gp.bagSizes)
        for i, (loc, size_list) in enumerate(groups):
            row_total = sum(q for _, q in size_list)
            running += row_total
            rows.append(
                LedgerRow(
                    date=format_pdf_date(gp.date),
                    voucher=str(gp.gatePassNo),
                    variety=gp.variety or DASH,
                    chamber=loc.chamber,
                    floor=loc.floor,
                    row=loc.row,
                    sizeQtys=_size_qtys(size_list, size_columns),
                    rowTotal=row_total,
                    runningTotal=running,
                    remarks=remarks if i == 0 else DASH,
                    account=_account(gp, include_account),
                )
            )
    return rows


def build_delivery_rows(
    deliveries: Iterable[PassLike],
    size_columns: Sequence[str],
    opening_total: int,
    include_account: bool = False,
) -> List[LedgerRow]:
    rows: List[LedgerRow] = []
    running = opening_total
    for gp in chronological(_as_pass(p) for p in deliveries):
        if not gp.is_delivery:
            continue
        details = gp.orderDetails

        if not any(d.location is not None for d in details):
            row_total = sum(d.quantityIssued for d in details)
            running -= row_total
            rows.append(
                LedgerRow(
                    date=format_pdf_date(gp.date),
                    voucher=str(gp.gatePassNo),
                    variety=gp.variety or DASH,
                    chamber=DASH,
                    floor=DASH,
                    row=DASH,
                    sizeQtys=_size_qtys([(d.size, d.quantityIssued) for d in details], size_columns),
                    rowTotal=row_total,
                    runningTotal=running,
                    account=_account(gp, include_account),
                )
            )
            continue

        for loc, size_list in _split_by_location((d.location, d.size, d.quantityIssued) for d in details):
            row_total = sum(q for _, q in size_list)
            running -= row_total
            rows.append(
                LedgerRow(
                    date=format_pdf_date(gp.date),
                    voucher=str(gp.gatePassNo),
                    variety=gp.variety or DASH,
                    chamber=loc.chamber,
                    floor=loc.floor,
                    row=loc.row,
                    sizeQtys=_size_qtys(size_list, size_columns),
                    rowTotal=row_total,
                    runningTotal=running,
                    account=_account(gp, include_account),
                )
            )
    return rows


def _column_totals(rows: Sequence[LedgerRow], size_columns: Sequence[str]) -> Dict[str, int]:
    return {col: sum(r.sizeQtys.get(col, 0) for r in rows) for col in size_columns}


def build_ledger_rows(
    receipts: Iterable[PassLike],
    deliveries: Iterable[PassLike],
    size_columns: Sequence[str],
    include_account: bool = False,
) -> LedgerRows:
    """Pure: no rendering, no I/O. `include_account` adds the A/c column for period reports."""
    size_columns = list(size_columns)
    receipt_rows = build_receipt_rows(receipts, size_columns, include_account)
    total_received = sum(r.rowTotal for r in receipt_rows)
    delivery_rows = build_delivery_rows(deliveries, size_columns, total_received, include_account)
    total_delivered = sum(r.rowTotal for r in delivery_rows)

    return LedgerRows(
        receipt_rows=receipt_rows,
        delivery_rows=delivery_rows,
        total_received=total_received,
        total_delivered=total_delivered,
        receipt_totals_by_size=_column_totals(receipt_rows, size_columns),
        delivery_totals_by_size=_column_totals(delivery_rows, size_columns),
    )
