# coldstore/routes/finance_routes.py

from flask import Blueprint, request

from coldstore.routes.route_helpers import get_client, json_body, ok, require_admin
from coldstore.services.accounting.accounting_service import AccountingService

finance_bp = Blueprint("store_admin_finance", __name__, url_prefix="/store-admin/finances")


def _period():
    return {"date_from": request.args.get("from"), "date_to": request.args.get("to")}


# ----------------------------
# LEDGERS
# ----------------------------
@finance_bp.get("/ledgers")
@require_admin
def list_ledgers():
    ledgers = AccountingService.list_ledgers(
        get_client(),
        type_=request.args.get("type"),
        search=request.args.get("search"),
        farmer_storage_link_id=request.args.get("farmerStorageLinkId"),
        **_period(),
    )
    return ok(ledgers=ledgers)


@finance_bp.post("/ledgers")
@require_admin
def create_ledger():
    return ok(201, **AccountingService.create_ledger(get_client(), json_body()))


@finance_bp.put("/ledgers/<ledger_id>")
@require_admin
def update_ledger(ledger_id):
    return ok(**AccountingService.update_ledger(get_client(), ledger_id, json_body()))


@finance_bp.get("/ledgers/balances")
@require_admin
def ledger_balances():
    return ok(ledgers=AccountingService.closing_balances(get_client(), **_period()))


@finance_bp.get("/ledgers/<ledger_id>/statement")
@require_admin
def ledger_statement(ledger_id):
    return ok(statement=AccountingService.statement(get_client(), ledger_id, **_period()))


@finance_bp.get("/balance-sheet")
@require_admin
def balance_sheet():
    return ok(balanceSheet=AccountingService.balance_sheet(get_client(), **_period()))


# ----------------------------
# VOUCHERS
# ----------------------------
@finance_bp.get("/vouchers")
@require_admin
def list_vouchers():
    vouchers = AccountingService.list_vouchers(
        get_client(),
        farmer_storage_link_id=request.args.get("farmerStorageLinkId"),
        **_period(),
    )
    return ok(vouchers=vouchers)


@finance_bp.post("/vouchers")
@require_admin
def create_voucher():
    return ok(201, **AccountingService.create_voucher(get_client(), json_body()))


@finance_bp.put("/vouchers/<voucher_id>")
@require_admin
def update_voucher(voucher_id):
    return ok(**AccountingService.update_voucher(get_client(), voucher_id, json_body()))


@finance_bp.delete("/vouchers/<voucher_id>")
@require_admin
def delete_voucher(voucher_id):
    return ok(**AccountingService.delete_voucher(get_client(), voucher_id))
