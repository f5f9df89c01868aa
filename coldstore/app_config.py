# coldstore/app_config.py

import logging
import os
from datetime import timedelta

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, raw, default)
        return default


def load_config(app, overrides=None):
    """
    Load all Flask configuration in a clean centralized way.
    Values come from the environment; `overrides` wins (used by tests).
    """
    # ------------------------------
    # Remote cold-storage API
    # ------------------------------
    app.config["COLDSTORE_API_BASE_URL"] = (
        os.getenv("COLDSTORE_API_BASE_URL", "http://localhost:5000") or ""
    ).rstrip("/")
    app.config["COLDSTORE_API_TIMEOUT"] = _env_int("COLDSTORE_API_TIMEOUT", 15)

    # ------------------------------
    # Session / security
    # ------------------------------
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY") or os.urandom(24)
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(
        days=_env_int("SESSION_LIFETIME_DAYS", 7)
    )
    app.config["CORS_ORIGINS"] = os.getenv("CORS_ORIGINS", "*")

    # ------------------------------
    # Reports
    # ------------------------------
    app.config["COMPANY_NAME"] = os.getenv("COMPANY_NAME", "Cold Storage")

    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO").upper()

    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])
    app.logger.info("Config loaded (api=%s)", app.config["COLDSTORE_API_BASE_URL"])
