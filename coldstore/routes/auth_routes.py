# coldstore/routes/auth_routes.py

import logging

from flask import Blueprint, session

from coldstore.models.store_admin_models import Preferences
from coldstore.routes.route_helpers import (
    forget_login,
    get_client,
    json_body,
    ok,
    remember_login,
    require_admin,
)
from coldstore.services.api_client import ApiError
from coldstore.services.store_admin.store_admin_service import StoreAdminService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("store_admin_auth", __name__, url_prefix="/store-admin")


@auth_bp.post("/login")
def login():
    forget_login()
    out = StoreAdminService.login(get_client(), json_body())
    admin, token = out["storeAdmin"], out["token"]

    # login usually embeds the preferences document; otherwise fetch it once
    prefs_doc = admin.coldStorageId.preferencesId
    if isinstance(prefs_doc, dict):
        preferences = Preferences.model_validate(prefs_doc)
    else:
        try:
            preferences = StoreAdminService.get_preferences(get_client(token=token))
        except ApiError as e:
            logger.warning("Preferences unavailable at login: %s", e.message)
            preferences = None

    remember_login(admin, token, preferences)
    return ok(storeAdmin=admin, preferences=preferences)


@auth_bp.post("/logout")
def logout():
    message = "Logged out successfully!"
    if session.get("token"):
        try:
            message = StoreAdminService.logout(get_client())
        except ApiError as e:
            # local session goes regardless
            logger.warning("Remote logout failed: %s", e.message)
    forget_login()
    return ok(message=message)


@auth_bp.get("/me")
@require_admin
def me():
    return ok(
        admin={
            "id": session.get("admin_id"),
            "name": session.get("admin_name"),
            "coldStorageId": session.get("cold_storage_id"),
            "coldStorageName": session.get("cold_storage_name"),
        },
        sizes=session.get("sizes") or [],
        varieties=session.get("varieties") or [],
    )
