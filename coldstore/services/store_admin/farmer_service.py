# coldstore/services/store_admin/farmer_service.py

import logging
from typing import Any, Dict, List, Mapping, Optional

from coldstore.models.farmer_models import (
    CheckMobileInput,
    FarmerStorageLink,
    LinkFarmerInput,
    QuickRegisterFarmerInput,
    UpdateFarmerStorageLinkInput,
)
from coldstore.models.gate_pass_models import GatePass, Pagination
from coldstore.services.api_client import ApiError, ApiInputError, ColdStoreApiClient, unwrap_status, unwrap_success

logger = logging.getLogger(__name__)

QUICK_REGISTER_MESSAGES = {
    400: "Invalid request. Please check your input.",
    404: "Cold storage or store admin not found.",
    409: "Farmer or link already exists.",
}

UPDATE_LINK_MESSAGES = {
    400: "Invalid request. Please check your input.",
    404: "Farmer-storage-link not found.",
    409: "Conflict. Resource may already exist or duplicate data.",
}

CHECK_MOBILE_MESSAGES = {
    400: "Invalid mobile number. Use a 10-digit Indian number starting with 6–9.",
}

LINK_FARMER_MESSAGES = {
    400: "Invalid request. Check farmer ID, account number, and cost per bag.",
    401: "Please sign in again to link a farmer.",
    404: "Farmer, cold storage, or store admin not found.",
    409: "This farmer is already linked or the account number is already in use.",
}

GATE_PASS_TYPES = ("all", "incoming", "outgoing")
GATE_PASS_SORTS = ("latest", "oldest")


class FarmerService:
    @staticmethod
    def list_links(client: ColdStoreApiClient) -> List[FarmerStorageLink]:
        data = client.get("/store-admin/farmer-storage-links", default_error="Failed to fetch farmer storage links")
        rows = unwrap_success(data, "Failed to fetch farmer storage links")
        return [FarmerStorageLink.model_validate(r) for r in rows or []]

    @staticmethod
    def find_link(client: ColdStoreApiClient, link_id: str) -> FarmerStorageLink:
        for link in FarmerService.list_links(client):
            if link.id == link_id:
                return link
        raise ApiError("Farmer-storage-link not found.", status=404)

    @staticmethod
    def quick_register(client: ColdStoreApiClient, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = QuickRegisterFarmerInput.model_validate(dict(payload))
        data = client.post(
            "/store-admin/quick-register-farmer",
            body.to_payload(),
            default_error="Failed to register farmer",
            status_messages=QUICK_REGISTER_MESSAGES,
        )
        if not data.get("success"):
            raise ApiError(data.get("message") or "Failed to register farmer")
        logger.info("Registered farmer account #%s", body.accountNumber)
        return {"message": data.get("message") or "Farmer registered successfully", "data": data.get("data")}

    @staticmethod
    def update_link(client: ColdStoreApiClient, link_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = UpdateFarmerStorageLinkInput.model_validate(dict(payload))
        data = client.put(
            f"/store-admin/farmer-storage-link/{link_id}",
            body.to_payload(),
            default_error="Failed to update farmer",
            status_messages=UPDATE_LINK_MESSAGES,
        )
        if not data.get("success"):
            raise ApiError(data.get("message") or "Failed to update farmer")
        return {"message": data.get("message") or "Farmer updated successfully", "data": data.get("data")}

    @staticmethod
    def check_mobile(client: ColdStoreApiClient, mobile_number: Any) -> Dict[str, Any]:
        """`farmer` is set when the number already belongs to a registered farmer."""
        body = CheckMobileInput.model_validate({"mobileNumber": mobile_number})
        data = client.post(
            "/farmer-storage-link/check",
            body.to_payload(),
            default_error="Failed to check mobile number",
            status_messages=CHECK_MOBILE_MESSAGES,
        )
        found = (data.get("data") or {}).get("farmer")
        return {"exists": bool(found), "farmer": found, "message": data.get("message")}

    @staticmethod
    def link_farmer(client: ColdStoreApiClient, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = LinkFarmerInput.model_validate(dict(payload))
        data = client.post(
            "/farmer-storage-link/link-farmer-to-store",
            body.to_payload(),
            default_error="Failed to link farmer to store",
            status_messages=LINK_FARMER_MESSAGES,
        )
        if not data.get("success"):
            raise ApiError(data.get("message") or "Failed to link farmer to store")
        return {"message": data.get("message") or "Farmer linked successfully", "data": data.get("data")}

    @staticmethod
    def gate_passes(
        client: ColdStoreApiClient,
        link_id: str,
        type_: str = "all",
        sort_by: str = "latest",
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        """A farmer's gate passes split into receipts and deliveries."""
        if type_ not in GATE_PASS_TYPES:
            raise ApiInputError(f"type must be one of {GATE_PASS_TYPES}")
        if sort_by not in GATE_PASS_SORTS:
            raise ApiInputError(f"sortBy must be one of {GATE_PASS_SORTS}")

        data = client.get(
            f"/store-admin/farmer-storage-links/{link_id}/gate-passes",
            params={"type": type_, "sortBy": sort_by, "from": date_from, "to": date_to},
            default_error="Failed to fetch farmer gate passes",
        )
        rows = unwrap_status(data, "Failed to fetch farmer gate passes")

        incoming: List[GatePass] = []
        outgoing: List[GatePass] = []
        for raw in rows or []:
            gp = GatePass.model_validate(raw)
            (incoming if gp.is_receipt else outgoing).append(gp)

        return {
            "incoming": incoming,
            "outgoing": outgoing,
            "pagination": Pagination.model_validate(data.get("pagination") or {}),
        }
