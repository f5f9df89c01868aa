# coldstore/routes/settings_routes.py

from flask import Blueprint, session

from coldstore.routes.route_helpers import get_client, ok, require_admin
from coldstore.services.store_admin.store_admin_service import StoreAdminService

settings_bp = Blueprint("store_admin_settings", __name__, url_prefix="/store-admin")


@settings_bp.get("/preferences")
@require_admin
def preferences():
    prefs = StoreAdminService.get_preferences(get_client())
    # refresh the cached size columns while we're at it
    session["sizes"] = prefs.bag_sizes()
    session["varieties"] = prefs.varieties()
    return ok(preferences=prefs, sizes=session["sizes"], varieties=session["varieties"])


@settings_bp.get("/edit-history")
@require_admin
def edit_history():
    return ok(entries=StoreAdminService.get_edit_history(get_client()))
