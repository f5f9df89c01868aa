"""
Tests for the service layer against a mocked ColdStoreApiClient.
"""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from coldstore.services.accounting.accounting_service import AccountingService
from coldstore.services.analytics.analytics_service import AnalyticsService
from coldstore.services.api_client import ApiError, ApiInputError, ColdStoreApiClient
from coldstore.services.gate_pass.gate_pass_service import GatePassService
from coldstore.services.reports.report_service import ReportService
from coldstore.services.store_admin.farmer_service import FarmerService
from coldstore.services.store_admin.store_admin_service import StoreAdminService


@pytest.fixture
def api():
    return MagicMock(spec=ColdStoreApiClient)


class TestStoreAdminService:
    def test_login_returns_admin_and_token(self, api):
        api.post.return_value = {
            "success": True,
            "data": {"token": "tok", "storeAdmin": {"_id": "a1", "name": "Ramesh", "coldStorageId": {"_id": "cs", "name": "Shiv"}}},
        }
        out = StoreAdminService.login(api, {"mobileNumber": "9876543210", "password": "pw"})
        assert out["token"] == "tok"
        assert out["storeAdmin"].coldStorageId.name == "Shiv"
        path, body = api.post.call_args[0]
        assert path == "/store-admin/login"
        assert body == {"mobileNumber": "9876543210", "password": "pw"}

    def test_login_validates_before_calling(self, api):
        with pytest.raises(ValidationError):
            StoreAdminService.login(api, {"mobileNumber": "123", "password": "pw"})
        api.post.assert_not_called()

    def test_login_without_token(self, api):
        api.post.return_value = {"success": True, "data": {"storeAdmin": {}}}
        with pytest.raises(ApiError):
            StoreAdminService.login(api, {"mobileNumber": "9876543210", "password": "pw"})

    def test_daybook_empty_store_is_not_an_error(self, api):
        api.get.return_value = {"status": "Fail", "message": "No entries", "pagination": {"totalItems": 0}}
        out = StoreAdminService.get_daybook(api, {"limit": "1000"})
        assert out["entries"] == []
        assert api.get.call_args[1]["params"]["limit"] == 100

    def test_daybook_entries(self, api, make_receipt, make_delivery):
        api.get.return_value = {
            "status": "Success",
            "data": [make_receipt(1, "2024-01-01", []), make_delivery(2, "2024-01-02", [])],
            "pagination": {"totalItems": 2, "currentPage": 1},
        }
        out = StoreAdminService.get_daybook(api)
        assert [e.type for e in out["entries"]] == ["RECEIPT", "DELIVERY"]
        assert out["pagination"].totalItems == 2

    def test_search_requires_receipt(self, api):
        with pytest.raises(ApiInputError):
            StoreAdminService.search_by_receipt(api, "  ")

    def test_search_tags_types(self, api):
        api.post.return_value = {"status": "Success", "data": {"incoming": [{"_id": "i"}], "outgoing": [{"_id": "o"}]}}
        out = StoreAdminService.search_by_receipt(api, 42)
        assert out["incoming"][0].is_receipt
        assert out["outgoing"][0].is_delivery
        assert api.post.call_args[0][1] == {"receiptNumber": "42"}

    def test_voucher_number(self, api):
        api.get.return_value = {"success": True, "data": {"nextNumber": "17"}}
        assert StoreAdminService.get_voucher_number(api, "incoming") == 17
        with pytest.raises(ApiInputError):
            StoreAdminService.get_voucher_number(api, "both")


class TestFarmerService:
    LINKS = {"success": True, "data": [
        {"_id": "l1", "accountNumber": 1, "farmerId": {"name": "Mohan", "mobileNumber": "9876543210"}},
        {"_id": "l2", "accountNumber": 2, "farmerId": {"name": "Sita"}},
    ]}

    def test_find_link(self, api):
        api.get.return_value = self.LINKS
        assert FarmerService.find_link(api, "l2").name == "Sita"
        with pytest.raises(ApiError) as exc:
            FarmerService.find_link(api, "nope")
        assert exc.value.status == 404

    def test_check_mobile(self, api):
        api.post.return_value = {"success": True, "data": {"farmer": {"_id": "f1"}}, "message": "Found"}
        assert FarmerService.check_mobile(api, "9876543210")["exists"] is True
        api.post.return_value = {"success": True, "data": None}
        assert FarmerService.check_mobile(api, "9876543210")["exists"] is False

    def test_gate_passes_split(self, api, make_receipt, make_delivery):
        api.get.return_value = {"status": "Success", "data": [
            make_receipt(1, "2024-01-01", []), make_delivery(2, "2024-01-02", []), make_receipt(3, "2024-01-03", []),
        ]}
        out = FarmerService.gate_passes(api, "l1", date_from="2024-01-01")
        assert [g.gatePassNo for g in out["incoming"]] == [1, 3]
        assert [g.gatePassNo for g in out["outgoing"]] == [2]
        assert api.get.call_args[1]["params"]["from"] == "2024-01-01"

    def test_gate_passes_rejects_bad_sort(self, api):
        with pytest.raises(ApiInputError):
            FarmerService.gate_passes(api, "l1", sort_by="random")


class TestGatePassService:
    def test_update_requires_changes(self, api):
        with pytest.raises(ApiInputError, match="Nothing to update"):
            GatePassService.update_incoming(api, "g1", {})

    def test_failed_envelope_raises(self, api):
        api.post.return_value = {"success": False, "message": "Link inactive"}
        body = {"farmerStorageLinkId": "l1", "date": "2024-01-01", "variety": "Pukhraj",
                "bagSizes": [{"name": "Seed", "initialQuantity": 1, "currentQuantity": 1,
                              "location": {"chamber": "A", "floor": "1", "row": "1"}}]}
        with pytest.raises(ApiError, match="Link inactive"):
            GatePassService.create_incoming(api, body)

    def test_available_stock(self, make_receipt):
        from coldstore.models.gate_pass_models import GatePass

        passes = [GatePass.model_validate(make_receipt(1, "2024-01-01", [
            ("Seed", 10, 4, ("A", "1", "1")), ("Ration", 5, 0, ("A", "1", "2")),
        ])), GatePass.model_validate(make_receipt(2, "2024-01-01", [("Seed", 3, 0, ("B", "1", "1"))]))]
        stock = GatePassService.available_stock(passes)
        assert len(stock) == 1
        assert stock[0]["sizes"] == [{"size": "Seed", "available": 4, "location": {"chamber": "A", "floor": "1", "row": "1"}}]


class TestAccountingService:
    def test_list_ledgers_rejects_bad_type(self, api):
        with pytest.raises(ApiInputError):
            AccountingService.list_ledgers(api, type_="Cash")

    def test_statement_unknown_ledger(self, api):
        api.get.return_value = {"success": True, "data": []}
        with pytest.raises(ApiError) as exc:
            AccountingService.statement(api, "missing")
        assert exc.value.status == 404

    def test_closing_balances(self, api):
        ledgers = {"success": True, "data": [{"_id": "cash", "name": "Cash", "type": "Asset", "openingBalance": 100}]}
        vouchers = {"success": True, "data": [{"_id": "v", "amount": 40, "date": "2024-01-01",
                                               "debitLedger": "x", "creditLedger": "cash"}]}
        api.get.side_effect = [ledgers, vouchers]
        out = AccountingService.closing_balances(api, date_from="2024-01-01")
        assert out[0]["closingBalance"] == 60


class TestAnalyticsService:
    def test_reports_need_both_dates(self, api):
        with pytest.raises(ApiInputError):
            AnalyticsService.reports(api, "2024-01-01", "")

    def test_reports_grouped_flag(self, api):
        api.get.return_value = {"success": True, "data": {"from": "a", "to": "b", "farmers": []}}
        out = AnalyticsService.reports(api, "2024-01-01", "2024-01-31", group_by_farmers=True)
        assert out.is_grouped
        assert api.get.call_args[1]["params"]["groupByFarmers"] == "true"

    def test_drill_down(self, api, make_receipt):
        api.get.return_value = {"success": True, "data": {"incomingGatePasses": [
            make_receipt(1, "2024-01-01", [("Seed", 10, 6, ("A", "1", "R1")), ("Seed", 5, 5, ("B", "", "R2"))]),
        ]}}
        out = AnalyticsService.drill_down(api, "current", chamber="B", floor="(No floor)")
        assert out["total"] == 11
        assert [c["label"] for c in out["chambers"]] == ["A", "B"]
        assert out["floors"] == [{"label": "(No floor)", "quantity": 5, "count": 1}]
        assert out["rows"][0]["row"] == "R2"

    def test_drill_down_trims_chamber_and_floor(self, api, make_receipt):
        api.get.return_value = {"success": True, "data": {"incomingGatePasses": [
            make_receipt(1, "2024-01-01", [("Seed", 10, 6, ("A", "1", "R1"))]),
        ]}}
        out = AnalyticsService.drill_down(api, "current", chamber=" A", floor="1 ")
        assert out["chamber"] == "A"
        assert out["floors"] == [{"label": "1", "quantity": 6, "count": 1}]
        assert [r["gatePassNo"] for r in out["rows"]] == [1]

    def test_drill_down_blank_chamber_is_top_level(self, api, make_receipt):
        api.get.return_value = {"success": True, "data": {"incomingGatePasses": [
            make_receipt(1, "2024-01-01", [("Seed", 10, 6, ("A", "1", "R1"))]),
        ]}}
        out = AnalyticsService.drill_down(api, chamber="  ")
        assert "floors" not in out


class TestReportService:
    def test_gate_pass_slip_picks_layout(self, api, make_delivery):
        api.get.return_value = {"status": "Success", "data": [make_delivery(5, "2024-01-02", [("Seed", 2, None)])]}
        pdf, name = ReportService.gate_pass_slip(api, "Test", "l1", "out-5")
        assert pdf.startswith(b"%PDF")
        assert name == "outgoing-gate-pass-5.pdf"

    def test_gate_pass_slip_not_found(self, api):
        api.get.return_value = {"status": "Success", "data": []}
        with pytest.raises(ApiError):
            ReportService.gate_pass_slip(api, "Test", "l1", "missing")
