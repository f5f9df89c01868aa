# coldstore/services/analytics/analytics_service.py

import logging
from typing import Any, Dict, List, Optional, Sequence

from coldstore.models.analytics_models import (
    ReportsData,
    StorageSummary,
    TopFarmersChartData,
    VarietyBreakdown,
)
from coldstore.models.gate_pass_models import RECEIPT, GatePass
from coldstore.services.analytics import location_grouping
from coldstore.services.analytics import variety_breakdown as breakdown
from coldstore.services.api_client import ApiError, ApiInputError, ColdStoreApiClient, unwrap_success

logger = logging.getLogger(__name__)


class AnalyticsService:
    # -----------------------------
    # Remote fetches
    # -----------------------------
    @staticmethod
    def storage_summary(client: ColdStoreApiClient) -> StorageSummary:
        data = client.get("/analytics/summary", default_error="Failed to fetch storage summary")
        return StorageSummary.model_validate(unwrap_success(data, "Failed to fetch storage summary"))

    @staticmethod
    def top_farmers(client: ColdStoreApiClient) -> TopFarmersChartData:
        data = client.get("/analytics/top-farmers", default_error="Failed to fetch top farmers")
        out = unwrap_success(data, "Failed to fetch top farmers")
        if not isinstance(out, dict) or out.get("chartData") is None:
            raise ApiError(data.get("message") or "Failed to fetch top farmers")
        return TopFarmersChartData.model_validate(out["chartData"])

    @staticmethod
    def variety_breakdown(client: ColdStoreApiClient, variety: str) -> VarietyBreakdown:
        if not (variety or "").strip():
            raise ApiInputError("Variety is required")
        data = client.get(
            "/analytics/variety-breakdown",
            params={"variety": variety.strip()},
            default_error="Failed to fetch variety breakdown",
        )
        return VarietyBreakdown.model_validate(unwrap_success(data, "Failed to fetch variety breakdown"))

    @staticmethod
    def incoming_gate_passes(client: ColdStoreApiClient) -> List[GatePass]:
        data = client.get("/analytics/incoming-gate-passes", default_error="Failed to fetch incoming gate passes")
        out = unwrap_success(data, "Failed to fetch incoming gate passes")
        rows = out.get("incomingGatePasses") if isinstance(out, dict) else None
        if rows is None:
            raise ApiError(data.get("message") or "Failed to fetch incoming gate passes")
        return [GatePass.model_validate(dict(r, type=RECEIPT)) for r in rows]

    @staticmethod
    def reports(client: ColdStoreApiClient, date_from: str, date_to: str, group_by_farmers: bool = False) -> ReportsData:
        if not (date_from or "").strip() or not (date_to or "").strip():
            raise ApiInputError("Both from and to dates are required")
        data = client.get(
            "/analytics/get-reports",
            params={"from": date_from, "to": date_to, "groupByFarmers": "true" if group_by_farmers else "false"},
            default_error="Failed to fetch reports",
        )
        out = unwrap_success(data, "Failed to fetch reports")
        report = ReportsData.model_validate(out)
        logger.debug("Reports %s..%s grouped=%s", date_from, date_to, report.is_grouped)
        return report

    # -----------------------------
    # Display aggregates
    # -----------------------------
    @staticmethod
    def overview(
        client: ColdStoreApiClient,
        size_columns: Sequence[str],
        mode: str = "current",
        capacity: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Storage summary reshaped for the analytics page: stock matrix and capacity."""
        summary = AnalyticsService.storage_summary(client)
        matrix = breakdown.stock_matrix(summary.stockSummary, size_columns, mode)
        return {
            "summary": summary.model_dump(),
            "stockMatrix": matrix,
            "capacity": breakdown.capacity_utilisation(summary.totalInventory.current, capacity),
        }

    @staticmethod
    def breakdown_view(
        client: ColdStoreApiClient,
        variety: str,
        preference_sizes: Sequence[str],
        mode: str = "current",
        size_filter: Optional[str] = None,
    ) -> Dict[str, Any]:
        data = AnalyticsService.variety_breakdown(client, variety)
        sizes = data.sizes
        size_filter = None if (size_filter or "all") == "all" else size_filter
        view: Dict[str, Any] = {
            "variety": data.variety or variety,
            "mode": mode,
            "size": size_filter or "all",
            "tabs": breakdown.size_tabs(preference_sizes, sizes, mode),
            "sizeChart": breakdown.size_chart(sizes, mode, size_filter),
            "farmerShares": breakdown.farmer_shares(sizes, mode, size_filter),
        }
        if size_filter is None:
            view["farmerSizeMatrix"] = breakdown.farmer_size_matrix(sizes, mode, preference_sizes)
        return view

    @staticmethod
    def drill_down(
        client: ColdStoreApiClient,
        quantity_field: str = "current",
        chamber: Optional[str] = None,
        floor: Optional[str] = None,
    ) -> Dict[str, Any]:
        """chambers, then floors of a chamber, then order rows of a chamber+floor."""
        chamber = (chamber or "").strip()
        floor = (floor or "").strip()
        passes = AnalyticsService.incoming_gate_passes(client)
        out: Dict[str, Any] = {
            "quantityField": quantity_field,
            "total": location_grouping.total_quantity(passes, quantity_field),
            "chambers": [g.to_dict() for g in location_grouping.group_by_chamber(passes, quantity_field)],
        }
        if chamber:
            out["chamber"] = chamber
            out["floors"] = [g.to_dict() for g in location_grouping.group_by_floor(passes, chamber, quantity_field)]
            if floor:
                out["floor"] = floor
                out["rows"] = [r.to_dict() for r in location_grouping.order_rows(passes, chamber, floor, quantity_field)]
        return out
