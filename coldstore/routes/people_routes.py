# coldstore/routes/people_routes.py

from flask import Blueprint, request, session

from coldstore.routes.route_helpers import get_client, json_body, ok, require_admin
from coldstore.services.store_admin.farmer_service import FarmerService

people_bp = Blueprint("store_admin_people", __name__, url_prefix="/store-admin/farmers")


@people_bp.get("/")
@require_admin
def list_farmers():
    links = FarmerService.list_links(get_client())
    q = (request.args.get("q") or "").strip().lower()
    if q:
        links = [
            l for l in links
            if q in l.name.lower() or q in l.mobile_number or q == str(l.accountNumber)
        ]
    return ok(farmers=links, count=len(links))


@people_bp.get("/<link_id>")
@require_admin
def get_farmer(link_id):
    return ok(farmer=FarmerService.find_link(get_client(), link_id))


@people_bp.post("/quick-register")
@require_admin
def quick_register():
    payload = json_body()
    # the logged-in admin and their store fill in the ownership fields
    payload.setdefault("coldStorageId", session.get("cold_storage_id"))
    payload.setdefault("linkedById", session.get("admin_id"))
    return ok(201, **FarmerService.quick_register(get_client(), payload))


@people_bp.put("/<link_id>")
@require_admin
def update_farmer(link_id):
    return ok(**FarmerService.update_link(get_client(), link_id, json_body()))


@people_bp.post("/check-mobile")
@require_admin
def check_mobile():
    return ok(**FarmerService.check_mobile(get_client(), json_body().get("mobileNumber")))


@people_bp.post("/link")
@require_admin
def link_farmer():
    return ok(201, **FarmerService.link_farmer(get_client(), json_body()))


@people_bp.get("/<link_id>/gate-passes")
@require_admin
def farmer_gate_passes(link_id):
    out = FarmerService.gate_passes(
        get_client(),
        link_id,
        type_=request.args.get("type", "all"),
        sort_by=request.args.get("sortBy", "latest"),
        date_from=request.args.get("from"),
        date_to=request.args.get("to"),
    )
    return ok(**out)
