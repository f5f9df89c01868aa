# coldstore/services/analytics/variety_breakdown.py

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from coldstore.models.analytics_models import (
    VarietyBreakdownFarmer,
    VarietyBreakdownSize,
    VarietyStockSummary,
)
from coldstore.services.api_client import ApiInputError

QUANTITY_MODES = ("current", "initial", "outgoing")
BLANK_NAME = "—"

SizeLike = Union[VarietyBreakdownSize, Dict[str, Any]]


def get_quantity(initial: Optional[int], current: Optional[int], mode: str) -> int:
    """Quantity for a mode; `outgoing` is what has left the store, never negative."""
    if mode == "current":
        return current or 0
    if mode == "initial":
        return initial or 0
    if mode == "outgoing":
        return max(0, (initial or 0) - (current or 0))
    raise ApiInputError(f"mode must be one of {QUANTITY_MODES}, got {mode!r}")


def _as_sizes(sizes: Iterable[SizeLike]) -> List[VarietyBreakdownSize]:
    return [s if isinstance(s, VarietyBreakdownSize) else VarietyBreakdownSize.model_validate(s) for s in sizes]


def _size_qty(s: VarietyBreakdownSize, mode: str) -> int:
    return get_quantity(s.initialQuantity, s.currentQuantity, mode)


def _farmer_qty(f: VarietyBreakdownFarmer, mode: str) -> int:
    return get_quantity(f.initialQuantity, f.currentQuantity, mode)


def _filtered(sizes: List[VarietyBreakdownSize], size_filter: Optional[str]) -> List[VarietyBreakdownSize]:
    if not size_filter:
        return sizes
    wanted = size_filter.strip()
    return [s for s in sizes if s.size.strip() == wanted]


def _desc(rows: List[Dict[str, Any]], key: str = "value") -> List[Dict[str, Any]]:
    # stable: equal values keep first-seen order
    return sorted(rows, key=lambda r: r[key], reverse=True)


# -----------------------------
# per-size
# -----------------------------
def size_totals(sizes: Iterable[SizeLike], mode: str = "current") -> Dict[str, int]:
    out: Dict[str, int] = {}
    for s in _as_sizes(sizes):
        key = s.size.strip()
        if not key:
            continue
        out[key] = out.get(key, 0) + _size_qty(s, mode)
    return out


def size_tabs(preference_sizes: Sequence[str], sizes: Iterable[SizeLike], mode: str = "current") -> List[Dict[str, Any]]:
    """`All` plus one tab per configured size, labelled with its count when non-zero."""
    totals = size_totals(sizes, mode)
    tabs: List[Dict[str, Any]] = [{"value": "all", "label": "All"}]
    for raw in preference_sizes:
        name = (raw or "").strip()
        if not name:
            continue
        count = totals.get(name, 0)
        tabs.append({"value": name, "label": f"{name} ({count})" if count > 0 else name, "count": count})
    return tabs


def size_chart(sizes: Iterable[SizeLike], mode: str = "current", size_filter: Optional[str] = None) -> List[Dict[str, Any]]:
    rows = []
    for s in _filtered(_as_sizes(sizes), size_filter):
        q = _size_qty(s, mode)
        if q <= 0:
            continue
        rows.append({"name": s.size.strip() or BLANK_NAME, "value": q})
    return _desc(rows)


# -----------------------------
# per-farmer
# -----------------------------
def farmer_totals(sizes: Iterable[SizeLike], mode: str = "current", size_filter: Optional[str] = None) -> List[Dict[str, Any]]:
    by_name: Dict[str, int] = {}
    for s in _filtered(_as_sizes(sizes), size_filter):
        for f in s.farmerBreakdown:
            q = _farmer_qty(f, mode)
            if q <= 0:
                continue
            name = f.farmerName.strip() or BLANK_NAME
            by_name[name] = by_name.get(name, 0) + q
    return _desc([{"name": k, "value": v} for k, v in by_name.items()])


def farmer_shares(sizes: Iterable[SizeLike], mode: str = "current", size_filter: Optional[str] = None) -> List[Dict[str, Any]]:
    totals = farmer_totals(sizes, mode, size_filter)
    grand = sum(r["value"] for r in totals)
    return [
        {
            "farmerName": r["name"],
            "quantity": r["value"],
            "percentage": (r["value"] / grand) * 100 if grand > 0 else 0,
        }
        for r in totals
    ]


def farmer_size_matrix(
    sizes: Iterable[SizeLike],
    mode: str = "current",
    size_columns: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """
    Farmer x size table for the "all sizes" view.
    Columns are the configured sizes; rows carry total and share of the grand total.
    """
    columns = [c.strip() for c in (size_columns or []) if (c or "").strip()]
    by_farmer: Dict[str, Dict[str, int]] = {}
    for s in _as_sizes(sizes):
        key = s.size.strip()
        if not key:
            continue
        for f in s.farmerBreakdown:
            q = _farmer_qty(f, mode)
            if q <= 0:
                continue
            row = by_farmer.setdefault(f.farmerName.strip() or BLANK_NAME, {})
            row[key] = row.get(key, 0) + q

    grand = sum(sum(r.values()) for r in by_farmer.values())
    rows = []
    for name, qty in by_farmer.items():
        total = sum(qty.values())
        rows.append(
            {
                "farmerName": name,
                "quantitiesBySize": qty,
                "total": total,
                "percentage": (total / grand) * 100 if grand > 0 else 0,
            }
        )
    return {"columns": columns, "rows": _desc(rows, "total"), "grandTotal": grand}


# -----------------------------
# stock summary / capacity
# -----------------------------
def stock_matrix(
    stock_summary: Iterable[Union[VarietyStockSummary, Dict[str, Any]]],
    size_columns: Optional[Sequence[str]] = None,
    mode: str = "current",
) -> Dict[str, Any]:
    summary = [v if isinstance(v, VarietyStockSummary) else VarietyStockSummary.model_validate(v) for v in stock_summary]
    columns = [c.strip() for c in (size_columns or []) if c and c.strip()]
    if not columns:
        columns = sorted({s.size.strip() for v in summary for s in v.sizes if s.size.strip()})

    col_totals = {c: 0 for c in columns}
    mode_totals = {m: 0 for m in QUANTITY_MODES}
    rows = []
    for v in summary:
        # a size listed twice for one variety is summed, not overwritten
        by_size: Dict[str, List[int]] = {}
        for s in v.sizes:
            acc = by_size.setdefault(s.size.strip(), [0, 0])
            acc[0] += s.initialQuantity
            acc[1] += s.currentQuantity
        values: Dict[str, int] = {}
        for c in columns:
            init, cur = by_size.get(c, (0, 0))
            values[c] = get_quantity(init, cur, mode)
            col_totals[c] += values[c]
            for m in QUANTITY_MODES:
                mode_totals[m] += get_quantity(init, cur, m)
        rows.append({"variety": v.variety, "values": values, "total": sum(values.values())})

    return {
        "columns": columns,
        "rows": rows,
        "totals": col_totals,
        "grandTotal": sum(col_totals.values()),
        "modeTotals": mode_totals,
    }


def capacity_utilisation(current: int, capacity: Optional[int]) -> Dict[str, Any]:
    total = capacity or 0
    pct = (current / total) * 100 if total > 0 else 0
    return {
        "current": current,
        "capacity": total,
        "available": max(0, total - current),
        "percentage": round(pct, 1),
    }
