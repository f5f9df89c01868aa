# coldstore/routes/report_routes.py

from io import BytesIO

from flask import Blueprint, current_app, request, send_file

from coldstore.routes.route_helpers import arg_bool, arg_list, get_client, ok, require_admin
from coldstore.services.api_client import ApiInputError
from coldstore.services.reports.gate_pass_qr import gate_pass_qr_data_uri, qr_payload
from coldstore.services.reports.report_service import ReportService

report_bp = Blueprint("store_admin_reports", __name__, url_prefix="/store-admin/reports")


def _pdf_response(pdf: bytes, filename: str):
    return send_file(
        BytesIO(pdf),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=filename,
    )


@report_bp.get("/farmer/<link_id>.pdf")
@require_admin
def farmer_report(link_id):
    pdf, filename = ReportService.farmer_report(
        get_client(),
        current_app.config["COMPANY_NAME"],
        link_id,
        size_columns=arg_list("sizes"),
        date_from=request.args.get("from"),
        date_to=request.args.get("to"),
    )
    return _pdf_response(pdf, filename)


@report_bp.get("/daily.pdf")
@require_admin
def daily_report():
    """?from=YYYY-MM-DD&to=YYYY-MM-DD&groupByFarmers=true"""
    pdf, filename = ReportService.daily_report(
        get_client(),
        current_app.config["COMPANY_NAME"],
        request.args.get("from", ""),
        request.args.get("to", ""),
        group_by_farmers=arg_bool("groupByFarmers"),
        size_columns=arg_list("sizes"),
    )
    return _pdf_response(pdf, filename)


@report_bp.get("/gate-pass/<link_id>/<gate_pass_id>.pdf")
@require_admin
def gate_pass_slip(link_id, gate_pass_id):
    pdf, filename = ReportService.gate_pass_slip(
        get_client(),
        current_app.config["COMPANY_NAME"],
        link_id,
        gate_pass_id,
        storage_address=request.args.get("address"),
    )
    return _pdf_response(pdf, filename)


@report_bp.get("/gate-pass-qr")
@require_admin
def gate_pass_qr():
    """QR for on-screen slips: ?id=..&no=..&type=RECEIPT|DELIVERY"""
    gate_pass_id = (request.args.get("id") or "").strip()
    if not gate_pass_id:
        raise ApiInputError("Gate pass id is required")
    number = request.args.get("no", type=int)
    payload = qr_payload(gate_pass_id, number, request.args.get("type", ""))
    label = f"#{number}" if number is not None else None
    return ok(payload=payload, qr=gate_pass_qr_data_uri(payload, label))
