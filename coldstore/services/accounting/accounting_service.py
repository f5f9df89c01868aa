# coldstore/services/accounting/accounting_service.py

import logging
from typing import Any, Dict, List, Mapping, Optional

from coldstore.models.accounting_models import (
    LEDGER_TYPES,
    BalanceSheet,
    Ledger,
    LedgerCreate,
    LedgerStatement,
    LedgerUpdate,
    Voucher,
    VoucherCreate,
    VoucherUpdate,
)
from coldstore.services.accounting.balances import compute_ledger_balances, ledger_statement
from coldstore.services.api_client import ApiError, ApiInputError, ColdStoreApiClient

logger = logging.getLogger(__name__)

SERVER_ERROR = "Something went wrong on the server. Please try again later."

LEDGER_CREATE_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Please sign in again.",
    403: "You do not have permission to create ledgers.",
    409: "A ledger with this name or details already exists, or the operation conflicts with existing data.",
    500: SERVER_ERROR,
}

LEDGER_UPDATE_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Please sign in again.",
    403: "You do not have permission to update ledgers.",
    404: "Ledger not found.",
    409: "This ledger cannot be updated (it may conflict with existing data).",
    500: SERVER_ERROR,
}

VOUCHER_CREATE_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Please sign in again.",
    403: "You do not have permission to create vouchers.",
    409: "A voucher with these details already exists, or the operation conflicts with existing data.",
    500: SERVER_ERROR,
}

VOUCHER_UPDATE_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Please sign in again.",
    403: "You do not have permission to update vouchers.",
    404: "Voucher not found.",
    409: "This voucher cannot be updated (it may conflict with existing data).",
    500: SERVER_ERROR,
}

VOUCHER_DELETE_MESSAGES = {
    400: "Invalid request. This voucher cannot be deleted.",
    401: "Please sign in again.",
    403: "You do not have permission to delete vouchers.",
    404: "Voucher not found.",
    500: SERVER_ERROR,
}


def _list(data: Dict[str, Any], default_error: str) -> List[Dict[str, Any]]:
    rows = data.get("data")
    if not data.get("success") or not isinstance(rows, list):
        raise ApiError(default_error)
    return rows


def _mutation(data: Dict[str, Any], default_error: str, default_message: str) -> Dict[str, Any]:
    if not data.get("success"):
        raise ApiError(data.get("message") or default_error)
    return {"message": data.get("message") or default_message, "data": data.get("data")}


class AccountingService:
    # -----------------------------
    # Ledgers
    # -----------------------------
    @staticmethod
    def list_ledgers(
        client: ColdStoreApiClient,
        type_: Optional[str] = None,
        search: Optional[str] = None,
        farmer_storage_link_id: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> List[Ledger]:
        if type_ and type_ not in LEDGER_TYPES:
            raise ApiInputError(f"type must be one of {LEDGER_TYPES}")
        data = client.get(
            "/ledgers",
            params={
                "type": type_,
                "search": search,
                "farmerStorageLinkId": farmer_storage_link_id,
                "from": date_from,
                "to": date_to,
            },
            default_error="Failed to fetch ledgers",
        )
        return [Ledger.model_validate(r) for r in _list(data, "Failed to fetch ledgers")]

    @staticmethod
    def create_ledger(client: ColdStoreApiClient, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = LedgerCreate.model_validate(dict(payload))
        data = client.post(
            "/ledgers",
            body.to_payload(),
            default_error="Failed to create ledger",
            status_messages=LEDGER_CREATE_MESSAGES,
        )
        logger.info("Ledger %r (%s) created", body.name, body.type)
        return _mutation(data, "Failed to create ledger", "Ledger created")

    @staticmethod
    def update_ledger(client: ColdStoreApiClient, ledger_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = LedgerUpdate.model_validate(dict(payload))
        changes = body.to_payload()
        if not changes:
            raise ApiInputError("Nothing to update")
        data = client.put(
            f"/ledgers/{ledger_id}",
            changes,
            default_error="Failed to update ledger",
            status_messages=LEDGER_UPDATE_MESSAGES,
        )
        return _mutation(data, "Failed to update ledger", "Ledger updated")

    @staticmethod
    def balance_sheet(
        client: ColdStoreApiClient,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> BalanceSheet:
        data = client.get(
            "/ledgers/balance-sheet",
            params={"from": date_from, "to": date_to},
            default_error="Failed to fetch balance sheet",
        )
        if not data.get("success") or data.get("data") is None:
            raise ApiError("Failed to fetch balance sheet")
        return BalanceSheet.model_validate(data["data"])

    # -----------------------------
    # Vouchers
    # -----------------------------
    @staticmethod
    def list_vouchers(
        client: ColdStoreApiClient,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        farmer_storage_link_id: Optional[str] = None,
    ) -> List[Voucher]:
        data = client.get(
            "/vouchers",
            params={"from": date_from, "to": date_to, "farmerStorageLinkId": farmer_storage_link_id},
            default_error="Failed to fetch vouchers",
        )
        return [Voucher.model_validate(r) for r in _list(data, "Failed to fetch vouchers")]

    @staticmethod
    def create_voucher(client: ColdStoreApiClient, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = VoucherCreate.model_validate(dict(payload))
        data = client.post(
            "/vouchers",
            body.to_payload(),
            default_error="Failed to create voucher",
            status_messages=VOUCHER_CREATE_MESSAGES,
        )
        logger.info("Voucher created: %s -> %s, %.2f", body.debitLedger, body.creditLedger, body.amount)
        return _mutation(data, "Failed to create voucher", "Voucher created")

    @staticmethod
    def update_voucher(client: ColdStoreApiClient, voucher_id: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        body = VoucherUpdate.model_validate(dict(payload))
        changes = body.to_payload()
        if not changes:
            raise ApiInputError("Nothing to update")
        data = client.put(
            f"/vouchers/{voucher_id}",
            changes,
            default_error="Failed to update voucher",
            status_messages=VOUCHER_UPDATE_MESSAGES,
        )
        return _mutation(data, "Failed to update voucher", "Voucher updated")

    @staticmethod
    def delete_voucher(client: ColdStoreApiClient, voucher_id: str) -> Dict[str, Any]:
        data = client.delete(
            f"/vouchers/{voucher_id}",
            default_error="Failed to delete voucher",
            status_messages=VOUCHER_DELETE_MESSAGES,
        )
        logger.info("Voucher %s deleted", voucher_id)
        return _mutation(data, "Failed to delete voucher", "Voucher deleted")

    # -----------------------------
    # Derived views
    # -----------------------------
    @staticmethod
    def closing_balances(client: ColdStoreApiClient, **filters) -> List[Dict[str, Any]]:
        """Every ledger with its balance recomputed from opening balance and vouchers."""
        ledgers = AccountingService.list_ledgers(client)
        vouchers = AccountingService.list_vouchers(client, **filters)
        balances = compute_ledger_balances(ledgers, vouchers)
        return [
            {
                "id": l.id,
                "name": l.name,
                "type": l.type,
                "category": l.category,
                "openingBalance": l.openingBalance,
                "closingBalance": balances.get(l.id, l.openingBalance),
            }
            for l in ledgers
        ]

    @staticmethod
    def statement(client: ColdStoreApiClient, ledger_id: str, **filters) -> LedgerStatement:
        ledger = next((l for l in AccountingService.list_ledgers(client) if l.id == ledger_id), None)
        if ledger is None:
            raise ApiError("Ledger not found.", status=404)
        vouchers = AccountingService.list_vouchers(client, **filters)
        return ledger_statement(ledger, vouchers)
