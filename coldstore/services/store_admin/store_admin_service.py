# coldstore/services/store_admin/store_admin_service.py

import logging
from typing import Any, Dict, List, Mapping, Optional

from coldstore.models.gate_pass_models import DELIVERY, RECEIPT, GatePass, Pagination
from coldstore.models.store_admin_models import (
    DaybookQuery,
    EditHistoryEntry,
    LoginInput,
    Preferences,
    StoreAdmin,
)
from coldstore.services.api_client import (
    ApiError,
    ApiInputError,
    ColdStoreApiClient,
    unwrap_status,
    unwrap_success,
)

logger = logging.getLogger(__name__)

LOGIN_ERROR_MESSAGES = {
    400: "Enter a valid mobile number and password.",
    401: "Invalid mobile number or password.",
    404: "No store admin found with this mobile number.",
    423: "Account locked after too many failed attempts. Try again later.",
    500: "Something went wrong on the server. Please try again later.",
}

VOUCHER_TYPES = ("incoming", "outgoing")


class StoreAdminService:
    # -----------------------------
    # Auth
    # -----------------------------
    @staticmethod
    def login(client: ColdStoreApiClient, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        POST /store-admin/login -> {"storeAdmin": StoreAdmin, "token": str}.
        The caller stores the token in the session.
        """
        body = LoginInput.model_validate(dict(payload))
        data = client.post(
            "/store-admin/login",
            body.to_payload(),
            default_error="Login failed",
            status_messages=LOGIN_ERROR_MESSAGES,
        )
        out = unwrap_success(data, "Login failed")
        token = out.get("token")
        if not token:
            raise ApiError("Login response did not include a token")

        admin = StoreAdmin.model_validate(out.get("storeAdmin") or {})
        logger.info("Store admin %s logged in (cold storage %s)", admin.id, admin.coldStorageId.id)
        return {"storeAdmin": admin, "token": token}

    @staticmethod
    def logout(client: ColdStoreApiClient) -> str:
        data = client.post("/store-admin/logout", default_error="Logout failed")
        return data.get("message") or "Logged out successfully!"

    # -----------------------------
    # Daybook
    # -----------------------------
    @staticmethod
    def get_daybook(client: ColdStoreApiClient, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        query = DaybookQuery.model_validate(dict(params or {}))
        data = client.get("/store-admin/daybook", params=query.model_dump(), default_error="Failed to fetch daybook")

        pagination = Pagination.model_validate(data.get("pagination") or {})
        # the API reports an empty store as a failure with zero items
        if data.get("status") == "Fail" and pagination.totalItems == 0:
            return {"entries": [], "pagination": pagination, "message": data.get("message")}

        rows = unwrap_status(data, "Failed to fetch daybook")
        if not isinstance(rows, list):
            raise ApiError(data.get("message") or "Failed to fetch daybook")

        return {
            "entries": [GatePass.model_validate(r) for r in rows],
            "pagination": pagination,
            "message": data.get("message"),
        }

    @staticmethod
    def search_by_receipt(client: ColdStoreApiClient, receipt_number: Any) -> Dict[str, List[GatePass]]:
        receipt = str(receipt_number or "").strip()
        if not receipt:
            raise ApiInputError("Receipt number is required")

        data = client.post(
            "/store-admin/search-order-by-receipt",
            {"receiptNumber": receipt},
            default_error="Failed to search daybook by receipt",
        )
        if data.get("status") != "Success" or not data.get("data"):
            raise ApiError("Failed to search daybook by receipt")

        found = data["data"]
        return {
            "incoming": [GatePass.model_validate(dict(e, type=RECEIPT)) for e in found.get("incoming") or []],
            "outgoing": [GatePass.model_validate(dict(e, type=DELIVERY)) for e in found.get("outgoing") or []],
        }

    # -----------------------------
    # Misc lookups
    # -----------------------------
    @staticmethod
    def get_voucher_number(client: ColdStoreApiClient, voucher_type: str) -> int:
        if voucher_type not in VOUCHER_TYPES:
            raise ApiInputError(f"type must be one of {VOUCHER_TYPES}")

        data = client.get(
            "/store-admin/voucher-number",
            params={"type": voucher_type},
            default_error="Failed to fetch voucher number",
        )
        out = unwrap_success(data, "Failed to fetch voucher number")
        next_number = out.get("nextNumber") if isinstance(out, dict) else None
        if next_number is None:
            raise ApiError(data.get("message") or "Failed to fetch voucher number")
        return int(next_number)

    @staticmethod
    def get_preferences(client: ColdStoreApiClient) -> Preferences:
        data = client.get("/preferences/me", default_error="Failed to fetch preferences")
        if not data.get("success") or data.get("data") is None:
            err = data.get("error") or {}
            raise ApiError(err.get("message") or "Failed to fetch preferences")
        return Preferences.model_validate(data["data"])

    @staticmethod
    def get_edit_history(client: ColdStoreApiClient) -> List[EditHistoryEntry]:
        data = client.get("/edit-history/storage", default_error="Failed to fetch edit history")
        rows = unwrap_success(data, "Failed to fetch edit history")
        if not isinstance(rows, list):
            raise ApiError(data.get("message") or "Failed to fetch edit history")
        return [EditHistoryEntry.model_validate(r) for r in rows]
