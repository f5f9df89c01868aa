# coldstore/services/reports/report_service.py

import logging
from datetime import datetime
from typing import Optional, Sequence, Tuple

from coldstore.models.common import parse_api_date
from coldstore.services.analytics.analytics_service import AnalyticsService
from coldstore.services.api_client import ApiError, ColdStoreApiClient
from coldstore.services.reports import pdf_documents
from coldstore.services.store_admin.farmer_service import FarmerService
from coldstore.services.store_admin.store_admin_service import StoreAdminService

logger = logging.getLogger(__name__)


def _label_date(value: str) -> str:
    dt = parse_api_date(value)
    return dt.strftime("%d/%m/%Y") if dt else value


def _safe_filename(text: str) -> str:
    keep = "".join(ch if ch.isalnum() else "-" for ch in (text or "").strip())
    return "-".join(part for part in keep.split("-") if part) or "report"


class ReportService:
    """
    Fetch + render. Every method returns (pdf_bytes, download_name).
    `size_columns` falls back to the store's preference sizes.
    """

    @staticmethod
    def _sizes(client: ColdStoreApiClient, size_columns: Optional[Sequence[str]]) -> list:
        if size_columns:
            return list(size_columns)
        return StoreAdminService.get_preferences(client).bag_sizes()

    @staticmethod
    def farmer_report(
        client: ColdStoreApiClient,
        company_name: str,
        link_id: str,
        size_columns: Optional[Sequence[str]] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> Tuple[bytes, str]:
        link = FarmerService.find_link(client, link_id)
        passes = FarmerService.gate_passes(client, link_id, date_from=date_from, date_to=date_to)
        sizes = ReportService._sizes(client, size_columns)

        farmer = {
            "name": link.name,
            "accountNumber": link.accountNumber,
            "mobileNumber": link.mobile_number,
            "address": link.farmerId.address,
        }
        pdf = pdf_documents.farmer_report_pdf(
            company_name,
            farmer,
            passes["incoming"],
            passes["outgoing"],
            sizes,
            report_date=datetime.now().strftime("%d/%m/%Y"),
        )
        logger.info("Farmer report for link %s: %d receipts, %d deliveries",
                    link_id, len(passes["incoming"]), len(passes["outgoing"]))
        return pdf, f"farmer-report-{link.accountNumber}-{_safe_filename(link.name)}.pdf"

    @staticmethod
    def daily_report(
        client: ColdStoreApiClient,
        company_name: str,
        date_from: str,
        date_to: str,
        group_by_farmers: bool = False,
        size_columns: Optional[Sequence[str]] = None,
    ) -> Tuple[bytes, str]:
        data = AnalyticsService.reports(client, date_from, date_to, group_by_farmers)
        sizes = ReportService._sizes(client, size_columns)
        label = f"{_label_date(date_from)} to {_label_date(date_to)}"
        pdf = pdf_documents.daily_report_pdf(company_name, label, data, sizes)
        return pdf, f"daily-report-{_safe_filename(date_from)}-{_safe_filename(date_to)}.pdf"

    @staticmethod
    def gate_pass_slip(
        client: ColdStoreApiClient,
        company_name: str,
        link_id: str,
        gate_pass_id: str,
        storage_address: Optional[str] = None,
    ) -> Tuple[bytes, str]:
        """Slip for one of a farmer's gate passes; receipt or delivery decides the layout."""
        passes = FarmerService.gate_passes(client, link_id)
        gp = next((p for p in passes["incoming"] + passes["outgoing"] if p.id == gate_pass_id), None)
        if gp is None:
            raise ApiError("Gate pass not found.", status=404)

        if gp.is_receipt:
            pdf = pdf_documents.incoming_slip_pdf(company_name, gp, storage_address)
            return pdf, f"incoming-gate-pass-{gp.gatePassNo}.pdf"
        pdf = pdf_documents.outgoing_slip_pdf(company_name, gp, storage_address)
        return pdf, f"outgoing-gate-pass-{gp.gatePassNo}.pdf"
