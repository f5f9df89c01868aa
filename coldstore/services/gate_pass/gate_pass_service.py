# coldstore/services/gate_pass/gate_pass_service.py

import logging
from typing import Any, Dict, List, Mapping

from coldstore.models.gate_pass_models import (
    RECEIPT,
    GatePass,
    IncomingGatePassCreate,
    IncomingGatePassUpdate,
    OutgoingGatePassCreate,
)
from coldstore.services.api_client import ApiError, ApiInputError, ColdStoreApiClient, unwrap_success

logger = logging.getLogger(__name__)

SERVER_ERROR = "Something went wrong on the server. Please try again later."

INCOMING_CREATE_MESSAGES = {
    400: "Invalid request. Please check your input.",
    404: "Farmer-storage link not found.",
    409: "A gate pass with these details already exists.",
    500: SERVER_ERROR,
}

INCOMING_UPDATE_MESSAGES = {
    400: "Invalid request. Please check your input.",
    404: "Incoming gate pass not found.",
    409: "A conflict occurred while updating.",
    500: SERVER_ERROR,
}

OUTGOING_CREATE_MESSAGES = {
    400: "Invalid request. Please check your input.",
    404: "Incoming gate pass or farmer link not found.",
    409: "A gate pass with this number already exists.",
    500: SERVER_ERROR,
}


def _created(data: Dict[str, Any], default_error: str) -> Dict[str, Any]:
    if not data.get("success"):
        raise ApiError(data.get("message") or default_error)
    return {"message": data.get("message"), "data": data.get("data")}


class GatePassService:
    # -----------------------------
    # Incoming (receipts)
    # -----------------------------
    @staticmethod
    def create_incoming(client: ColdStoreApiClient, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = IncomingGatePassCreate.model_validate(dict(payload))
        data = client.post(
            "/incoming-gate-pass",
            body.to_payload(),
            default_error="Failed to create incoming gate pass",
            status_messages=INCOMING_CREATE_MESSAGES,
        )
        out = _created(data, "Failed to create incoming gate pass")
        out["message"] = out["message"] or "Incoming gate pass created"
        logger.info("Incoming gate pass created for link %s (%s bags)",
                    body.farmerStorageLinkId, sum(b.initialQuantity for b in body.bagSizes))
        return out

    @staticmethod
    def update_incoming(client: ColdStoreApiClient, gate_pass_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = IncomingGatePassUpdate.model_validate(dict(payload))
        changes = body.to_payload()
        if not changes:
            raise ApiInputError("Nothing to update")

        data = client.put(
            f"/incoming-gate-pass/{gate_pass_id}",
            changes,
            default_error="Failed to update incoming gate pass",
            status_messages=INCOMING_UPDATE_MESSAGES,
        )
        out = _created(data, "Failed to update incoming gate pass")
        out["message"] = out["message"] or "Incoming gate pass updated"
        return out

    @staticmethod
    def incoming_for_farmer(client: ColdStoreApiClient, link_id: str) -> List[GatePass]:
        data = client.get(
            f"/incoming-gate-pass/farmer-storage-link/{link_id}",
            default_error="Failed to fetch incoming gate passes for farmer",
        )
        rows = unwrap_success(data, "Failed to fetch incoming gate passes for farmer")
        if not isinstance(rows, list):
            raise ApiError(data.get("message") or "Failed to fetch incoming gate passes for farmer")
        return [GatePass.model_validate(dict(r, type=r.get("type") or RECEIPT)) for r in rows]

    @staticmethod
    def available_stock(passes: List[GatePass]) -> List[Dict[str, Any]]:
        """Bag sizes still in store, per receipt, for picking outgoing allocations."""
        out = []
        for gp in passes:
            sizes = [
                {"size": b.name, "available": b.currentQuantity, "location": b.location.model_dump()}
                for b in gp.bagSizes
                if b.currentQuantity > 0
            ]
            if sizes:
                out.append({"incomingGatePassId": gp.id, "gatePassNo": gp.gatePassNo,
                            "variety": gp.variety, "date": gp.date, "sizes": sizes})
        return out

    # -----------------------------
    # Outgoing (deliveries)
    # -----------------------------
    @staticmethod
    def create_outgoing(client: ColdStoreApiClient, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = OutgoingGatePassCreate.model_validate(dict(payload))
        data = client.post(
            "/outgoing-gate-pass",
            body.to_payload(),
            default_error="Failed to create outgoing gate pass",
            status_messages=OUTGOING_CREATE_MESSAGES,
        )
        out = _created(data, "Failed to create outgoing gate pass")
        out["message"] = out["message"] or "Outgoing gate pass created"
        logger.info("Outgoing gate pass #%s created for link %s", body.gatePassNo, body.farmerStorageLinkId)
        return out
