# coldstore/routes/gate_pass_routes.py

from flask import Blueprint

from coldstore.routes.route_helpers import get_client, json_body, ok, require_admin
from coldstore.services.gate_pass.gate_pass_service import GatePassService

gate_pass_bp = Blueprint("store_admin_gate_pass", __name__, url_prefix="/store-admin")


# ----------------------------
# INCOMING
# ----------------------------
@gate_pass_bp.post("/incoming")
@require_admin
def create_incoming():
    return ok(201, **GatePassService.create_incoming(get_client(), json_body()))


@gate_pass_bp.put("/incoming/<gate_pass_id>")
@require_admin
def update_incoming(gate_pass_id):
    return ok(**GatePassService.update_incoming(get_client(), gate_pass_id, json_body()))


@gate_pass_bp.get("/incoming/farmer/<link_id>")
@require_admin
def incoming_for_farmer(link_id):
    """Receipts of one farmer plus what is still in store, for the outgoing form."""
    passes = GatePassService.incoming_for_farmer(get_client(), link_id)
    return ok(incoming=passes, available=GatePassService.available_stock(passes))


# ----------------------------
# OUTGOING
# ----------------------------
@gate_pass_bp.post("/outgoing")
@require_admin
def create_outgoing():
    return ok(201, **GatePassService.create_outgoing(get_client(), json_body()))
