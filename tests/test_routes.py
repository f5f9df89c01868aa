"""
Route tests: session gate, JSON envelopes, error mapping, PDF downloads.
Services are patched; no HTTP leaves the test process.
"""

from unittest.mock import patch

import jwt

from coldstore.models.store_admin_models import StoreAdmin
from coldstore.routes.route_helpers import token_expired
from coldstore.services.api_client import ApiAuthError, ApiError, ApiInputError, ApiNetworkError

from conftest import make_token


class TestTokenExpiry:
    def test_fresh_and_expired(self):
        assert token_expired(make_token(3600)) is False
        assert token_expired(make_token(-10)) is True

    def test_opaque_token_left_to_api(self):
        assert token_expired("not-a-jwt") is False

    def test_garbled_exp_left_to_api(self):
        token = jwt.encode({"sub": "admin-1", "exp": "soon"}, "test-signing-key-0123456789abcdef-xyz", algorithm="HS256")
        assert token_expired(token) is False


class TestSessionGate:
    def test_health_is_public(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["ok"] is True

    def test_requires_login(self, client):
        resp = client.get("/store-admin/daybook")
        assert resp.status_code == 401
        assert resp.get_json() == {"ok": False, "error": "unauthorized"}

    def test_expired_token_clears_session(self, client):
        with client.session_transaction() as sess:
            sess["token"] = make_token(-60)
            sess["admin_id"] = "a1"
        resp = client.get("/store-admin/me")
        assert resp.status_code == 401
        with client.session_transaction() as sess:
            assert "token" not in sess


class TestAuthRoutes:
    @patch("coldstore.routes.auth_routes.StoreAdminService")
    def test_login_stores_session(self, svc, client):
        admin = StoreAdmin.model_validate({
            "_id": "a1", "name": "Ramesh",
            "coldStorageId": {"_id": "cs-1", "name": "Shiv", "preferencesId": {
                "commodities": [{"name": "Potato", "varieties": ["Pukhraj"], "sizes": ["Seed", "Ration"]}]}},
        })
        svc.login.return_value = {"storeAdmin": admin, "token": make_token()}

        resp = client.post("/store-admin/login", json={"mobileNumber": "9876543210", "password": "pw"})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["ok"] is True
        assert body["storeAdmin"]["_id"] == "a1"
        svc.get_preferences.assert_not_called()

        with client.session_transaction() as sess:
            assert sess["cold_storage_id"] == "cs-1"
            assert sess["sizes"] == ["Seed", "Ration"]

    def test_login_validation_error_is_400(self, client):
        resp = client.post("/store-admin/login", json={"mobileNumber": "12", "password": "pw"})
        assert resp.status_code == 400
        assert resp.get_json()["ok"] is False

    @patch("coldstore.routes.auth_routes.StoreAdminService")
    def test_logout_survives_remote_failure(self, svc, admin_client):
        svc.logout.side_effect = ApiNetworkError("down")
        resp = admin_client.post("/store-admin/logout")
        assert resp.status_code == 200
        with admin_client.session_transaction() as sess:
            assert "token" not in sess

    def test_me(self, admin_client):
        body = admin_client.get("/store-admin/me").get_json()
        assert body["admin"]["name"] == "Ramesh"
        assert body["sizes"] == ["Ration", "Seed", "Goli"]


class TestErrorMapping:
    @patch("coldstore.routes.daybook_routes.StoreAdminService")
    def test_network_error_is_502(self, svc, admin_client):
        svc.get_daybook.side_effect = ApiNetworkError("Network error.")
        resp = admin_client.get("/store-admin/daybook")
        assert resp.status_code == 502
        assert resp.get_json() == {"ok": False, "error": "Network error."}

    @patch("coldstore.routes.daybook_routes.StoreAdminService")
    def test_auth_error_clears_session(self, svc, admin_client):
        svc.get_daybook.side_effect = ApiAuthError("Please sign in again.", status=401)
        resp = admin_client.get("/store-admin/daybook")
        assert resp.status_code == 401
        with admin_client.session_transaction() as sess:
            assert "token" not in sess

    @patch("coldstore.routes.people_routes.FarmerService")
    def test_business_error_keeps_status(self, svc, admin_client):
        svc.find_link.side_effect = ApiError("Farmer-storage-link not found.", status=404)
        resp = admin_client.get("/store-admin/farmers/x")
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "Farmer-storage-link not found."

    @patch("coldstore.routes.finance_routes.AccountingService")
    def test_upstream_500_is_502(self, svc, admin_client):
        svc.list_ledgers.side_effect = ApiError("Something went wrong", status=500, code="E500")
        resp = admin_client.get("/store-admin/finances/ledgers")
        assert resp.status_code == 502
        assert resp.get_json()["code"] == "E500"

    @patch("coldstore.routes.daybook_routes.StoreAdminService")
    def test_input_error_is_400(self, svc, admin_client):
        svc.search_by_receipt.side_effect = ApiInputError("Receipt number is required")
        resp = admin_client.post("/store-admin/daybook/search", json={})
        assert resp.status_code == 400
        assert resp.get_json() == {"ok": False, "error": "Receipt number is required"}

    @patch("coldstore.routes.daybook_routes.StoreAdminService")
    def test_internal_value_error_is_not_a_client_error(self, svc, app, admin_client):
        """A bug inside a service surfaces as a 500, not a 400 echoing its message."""
        app.config["PROPAGATE_EXCEPTIONS"] = False
        svc.search_by_receipt.side_effect = ValueError("invalid literal for int() with base 10: 'x'")
        resp = admin_client.post("/store-admin/daybook/search", json={"receiptNumber": "1"})
        assert resp.status_code == 500
        assert b"invalid literal" not in resp.data

    def test_qr_without_id_is_400(self, admin_client):
        resp = admin_client.get("/store-admin/reports/gate-pass-qr?no=3")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Gate pass id is required"


class TestPageRoutes:
    @patch("coldstore.routes.people_routes.FarmerService")
    def test_quick_register_fills_ownership(self, svc, admin_client):
        svc.quick_register.return_value = {"message": "ok", "data": None}
        resp = admin_client.post("/store-admin/farmers/quick-register", json={"name": "Mohan"})
        assert resp.status_code == 201
        payload = svc.quick_register.call_args[0][1]
        assert payload["coldStorageId"] == "cs-1"
        assert payload["linkedById"] == "admin-1"

    @patch("coldstore.routes.analytics_routes.AnalyticsService")
    def test_overview_uses_session_sizes(self, svc, admin_client):
        svc.overview.return_value = {"summary": {}, "stockMatrix": {}, "capacity": {}}
        resp = admin_client.get("/store-admin/analytics/overview?mode=initial&capacity=5000")
        assert resp.status_code == 200
        args, kwargs = svc.overview.call_args
        assert args[1] == ["Ration", "Seed", "Goli"]
        assert kwargs == {"mode": "initial", "capacity": 5000}

    @patch("coldstore.routes.analytics_routes.AnalyticsService")
    def test_incoming_gate_passes_listed(self, svc, admin_client):
        svc.incoming_gate_passes.return_value = []
        resp = admin_client.get("/store-admin/analytics/incoming-gate-passes")
        assert resp.status_code == 200
        assert resp.get_json() == {"ok": True, "gatePasses": []}

    @patch("coldstore.routes.analytics_routes.AnalyticsService")
    def test_variety_breakdown_size_override(self, svc, admin_client):
        svc.breakdown_view.return_value = {"variety": "Pukhraj"}
        admin_client.get("/store-admin/analytics/variety-breakdown?variety=Pukhraj&sizes=Seed,Goli&size=Seed")
        args, kwargs = svc.breakdown_view.call_args
        assert args[1:] == ("Pukhraj", ["Seed", "Goli"])
        assert kwargs["size_filter"] == "Seed"


class TestReportRoutes:
    @patch("coldstore.routes.report_routes.ReportService")
    def test_daily_pdf_download(self, svc, admin_client):
        svc.daily_report.return_value = (b"%PDF-1.4 fake", "daily-report-2024-01-01-2024-01-31.pdf")
        resp = admin_client.get("/store-admin/reports/daily.pdf?from=2024-01-01&to=2024-01-31&groupByFarmers=true")
        assert resp.status_code == 200
        assert resp.mimetype == "application/pdf"
        assert "daily-report-2024-01-01-2024-01-31.pdf" in resp.headers["Content-Disposition"]
        assert resp.data.startswith(b"%PDF")
        assert svc.daily_report.call_args[1]["group_by_farmers"] is True

    def test_gate_pass_qr(self, admin_client):
        body = admin_client.get("/store-admin/reports/gate-pass-qr?id=g1&no=12&type=RECEIPT").get_json()
        assert body["payload"] == '{"id":"g1","gatePassNo":12,"type":"RECEIPT"}'
        assert body["qr"].startswith("data:image/png;base64,")

    def test_gate_pass_qr_needs_id(self, admin_client):
        assert admin_client.get("/store-admin/reports/gate-pass-qr").status_code == 400
