# coldstore/routes/daybook_routes.py

from flask import Blueprint, request

from coldstore.routes.route_helpers import get_client, json_body, ok, require_admin
from coldstore.services.store_admin.store_admin_service import StoreAdminService

daybook_bp = Blueprint("store_admin_daybook", __name__, url_prefix="/store-admin")


@daybook_bp.get("/daybook")
@require_admin
def daybook():
    """?type=all|incoming|outgoing&sortBy=latest|oldest&page=1&limit=10"""
    out = StoreAdminService.get_daybook(get_client(), request.args.to_dict())
    return ok(**out)


@daybook_bp.post("/daybook/search")
@require_admin
def search_by_receipt():
    found = StoreAdminService.search_by_receipt(get_client(), json_body().get("receiptNumber"))
    return ok(**found)


@daybook_bp.get("/voucher-number")
@require_admin
def voucher_number():
    next_number = StoreAdminService.get_voucher_number(get_client(), request.args.get("type", ""))
    return ok(nextNumber=next_number)
