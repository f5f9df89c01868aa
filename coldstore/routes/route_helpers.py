# coldstore/routes/route_helpers.py
"""
Session auth + JSON plumbing shared by every store-admin blueprint.

The Flask session holds the admin's bearer token; each request builds its
own ColdStoreApiClient from it.
"""

import logging
import time
from dataclasses import is_dataclass
from functools import wraps
from typing import Any, List, Optional

import jwt
from flask import current_app, jsonify, request, session
from pydantic import BaseModel, ValidationError

from coldstore.models.common import first_validation_message
from coldstore.models.store_admin_models import Preferences, StoreAdmin
from coldstore.services.api_client import ApiAuthError, ApiError, ApiNetworkError, ColdStoreApiClient
from coldstore.services.store_admin.store_admin_service import StoreAdminService

logger = logging.getLogger(__name__)


# ----------------------------
# SESSION
# ----------------------------
def token_expired(token: str, leeway: int = 0) -> bool:
    """
    Read `exp` without verifying the signature; the API owns the key.
    Tokens that aren't JWTs, or carry no exp, are left for the API to judge.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.InvalidTokenError:
        return False
    try:
        exp = float(claims["exp"])
    except (KeyError, TypeError, ValueError):
        return False
    return exp <= time.time() + leeway


def remember_login(admin: StoreAdmin, token: str, preferences: Optional[Preferences] = None):
    session.clear()
    session.permanent = True
    session["token"] = token
    session["admin_id"] = admin.id
    session["admin_name"] = admin.name
    session["cold_storage_id"] = admin.coldStorageId.id
    session["cold_storage_name"] = admin.coldStorageId.name
    if preferences is not None:
        session["sizes"] = preferences.bag_sizes()
        session["varieties"] = preferences.varieties()


def forget_login():
    session.clear()


def get_client(token: Optional[str] = None) -> ColdStoreApiClient:
    return ColdStoreApiClient(
        current_app.config["COLDSTORE_API_BASE_URL"],
        token=token or session.get("token"),
        timeout=current_app.config["COLDSTORE_API_TIMEOUT"],
    )


def session_sizes(client: ColdStoreApiClient) -> List[str]:
    """Bag-size columns from the store preferences, cached in the session."""
    sizes = session.get("sizes")
    if sizes is None:
        prefs = StoreAdminService.get_preferences(client)
        sizes = prefs.bag_sizes()
        session["sizes"] = sizes
        session["varieties"] = prefs.varieties()
    return sizes


def require_admin(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = session.get("token")
        if not token:
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        if token_expired(token):
            logger.info("Session token expired for admin %s", session.get("admin_id"))
            forget_login()
            return jsonify({"ok": False, "error": "Session expired. Please sign in again."}), 401
        return fn(*args, **kwargs)

    return wrapper


# ----------------------------
# REQUEST / RESPONSE
# ----------------------------
def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def arg_bool(name: str, default: bool = False) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def arg_list(name: str) -> Optional[List[str]]:
    """?sizes=A,B or ?sizes=A&sizes=B"""
    values = [v for raw in request.args.getlist(name) for v in raw.split(",")]
    values = [v.strip() for v in values if v.strip()]
    return values or None


def to_json(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if is_dataclass(obj) and hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, dict):
        return {k: to_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json(v) for v in obj]
    return obj


def ok(status: int = 200, **payload):
    return jsonify({"ok": True, **{k: to_json(v) for k, v in payload.items()}}), status


# ----------------------------
# ERRORS
# ----------------------------
def _fail(message: str, status: int, code: Optional[str] = None):
    body = {"ok": False, "error": message}
    if code:
        body["code"] = code
    return jsonify(body), status


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return _fail(first_validation_message(e), 400)

    @app.errorhandler(ApiAuthError)
    def _auth_error(e):
        forget_login()
        return _fail(e.message, 401, e.code)

    @app.errorhandler(ApiNetworkError)
    def _network_error(e):
        return _fail(e.message, 502)

    @app.errorhandler(ApiError)
    def _api_error(e):
        status = e.status or 400
        if status >= 500:
            # upstream failure; this service is acting as a gateway
            status = 502
        elif status < 400:
            status = 400
        return _fail(e.message, status, e.code)
