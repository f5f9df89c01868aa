# coldstore/routes/analytics_routes.py

from flask import Blueprint, request, session

from coldstore.routes.route_helpers import arg_bool, arg_list, get_client, ok, require_admin, session_sizes
from coldstore.services.analytics.analytics_service import AnalyticsService

analytics_bp = Blueprint("store_admin_analytics", __name__, url_prefix="/store-admin/analytics")


@analytics_bp.get("/summary")
@require_admin
def summary():
    return ok(summary=AnalyticsService.storage_summary(get_client()))


@analytics_bp.get("/overview")
@require_admin
def overview():
    """Stock matrix (variety x size) plus capacity use. ?mode=current|initial|outgoing&capacity=N"""
    client = get_client()
    capacity = request.args.get("capacity", type=int)
    out = AnalyticsService.overview(
        client,
        arg_list("sizes") or session_sizes(client),
        mode=request.args.get("mode", "current"),
        capacity=capacity,
    )
    return ok(**out)


@analytics_bp.get("/top-farmers")
@require_admin
def top_farmers():
    return ok(chartData=AnalyticsService.top_farmers(get_client()))


@analytics_bp.get("/variety-breakdown")
@require_admin
def variety_breakdown():
    client = get_client()
    view = AnalyticsService.breakdown_view(
        client,
        request.args.get("variety", ""),
        arg_list("sizes") or session_sizes(client),
        mode=request.args.get("mode", "current"),
        size_filter=request.args.get("size"),
    )
    return ok(**view)


@analytics_bp.get("/incoming-gate-passes")
@require_admin
def incoming_gate_passes():
    return ok(gatePasses=AnalyticsService.incoming_gate_passes(get_client()))


@analytics_bp.get("/drill-down")
@require_admin
def drill_down():
    """?field=current|initial&chamber=..&floor=.."""
    out = AnalyticsService.drill_down(
        get_client(),
        quantity_field=request.args.get("field", "current"),
        chamber=request.args.get("chamber"),
        floor=request.args.get("floor"),
    )
    return ok(**out)


@analytics_bp.get("/reports")
@require_admin
def reports():
    data = AnalyticsService.reports(
        get_client(),
        request.args.get("from", ""),
        request.args.get("to", ""),
        group_by_farmers=arg_bool("groupByFarmers"),
    )
    return ok(report=data, coldStorage=session.get("cold_storage_name"))
