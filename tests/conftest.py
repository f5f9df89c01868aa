"""
Pytest fixtures shared by the unit and route tests.

- `app` / `client`: Flask app built with test config, no network.
- `admin_client`: test client whose session already holds a store-admin login.
- `make_receipt` / `make_delivery`: raw API-shaped gate-pass dicts.
"""

import time

import jwt
import pytest

from app import create_app

TEST_API = "http://api.test"


def make_token(exp_offset=3600):
    return jwt.encode({"sub": "admin-1", "exp": int(time.time()) + exp_offset}, "test-signing-key-0123456789abcdef-xyz", algorithm="HS256")


@pytest.fixture
def app():
    return create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key",
            "COLDSTORE_API_BASE_URL": TEST_API,
            "COMPANY_NAME": "Test Cold Storage",
            "LOG_LEVEL": "WARNING",
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    with client.session_transaction() as sess:
        sess["token"] = make_token()
        sess["admin_id"] = "admin-1"
        sess["admin_name"] = "Ramesh"
        sess["cold_storage_id"] = "cs-1"
        sess["cold_storage_name"] = "Test Cold Storage"
        sess["sizes"] = ["Ration", "Seed", "Goli"]
        sess["varieties"] = ["Pukhraj"]
    return client


# === GATE PASS FACTORIES ===
def _link(name="Mohan", account=12):
    return {"_id": f"link-{account}", "accountNumber": account, "farmerId": {"_id": f"f-{account}", "name": name}}


@pytest.fixture
def make_receipt():
    def _make(no, date, bags, remarks="", variety="Pukhraj", farmer="Mohan", account=12, pid=None):
        """bags: [(size, initial, current, (chamber, floor, row))]"""
        return {
            "_id": pid or f"in-{no}",
            "type": "RECEIPT",
            "gatePassNo": no,
            "date": date,
            "variety": variety,
            "remarks": remarks,
            "farmerStorageLinkId": _link(farmer, account),
            "bagSizes": [
                {
                    "name": size,
                    "initialQuantity": initial,
                    "currentQuantity": current,
                    "location": {"chamber": loc[0], "floor": loc[1], "row": loc[2]},
                }
                for size, initial, current, loc in bags
            ],
        }

    return _make


@pytest.fixture
def make_delivery():
    def _make(no, date, details, variety="Pukhraj", farmer="Mohan", account=12, pid=None):
        """details: [(size, issued, location-tuple-or-None)]"""
        order = []
        for size, issued, loc in details:
            d = {"size": size, "quantityIssued": issued, "quantityAvailable": 0}
            if loc is not None:
                d["location"] = {"chamber": loc[0], "floor": loc[1], "row": loc[2]}
            order.append(d)
        return {
            "_id": pid or f"out-{no}",
            "type": "DELIVERY",
            "gatePassNo": no,
            "date": date,
            "variety": variety,
            "farmerStorageLinkId": _link(farmer, account),
            "orderDetails": order,
        }

    return _make
