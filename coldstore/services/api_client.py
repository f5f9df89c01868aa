# coldstore/services/api_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
DEFAULT_TIMEOUT = 15

DEFAULT_ERROR_MESSAGE = "Request failed"

# Generic fallbacks when the API sends no usable message
STATUS_ERROR_MESSAGES: Dict[int, str] = {
    400: "Invalid request. Please check your input.",
    401: "Please sign in again.",
    404: "Requested record was not found.",
    409: "A record with these details already exists.",
    500: "Something went wrong on the server. Please try again later.",
}


class ApiError(Exception):
    """Server-reported business error (non-2xx, or an envelope saying it failed)."""

    def __init__(self, message: str, status: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    @property
    def description(self) -> Optional[str]:
        return f"Code: {self.code}" if self.code else None


class ApiNetworkError(ApiError):
    """Transport failure: connection refused or reset, DNS, timeout, redirect loop."""


class ApiInputError(ApiError):
    """Caller sent a bad argument; raised before any request goes out."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message, status=400, code=code)


class ApiAuthError(ApiError):
    """HTTP 401 from the API; the session token is no longer valid."""


def _safe_json(resp: requests.Response) -> Optional[Dict[str, Any]]:
    """
    Return JSON dict if response body is JSON, else None.
    Handles HTML gateway pages safely.
    """
    try:
        data = resp.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else {"data": data}


def extract_error_message(
    data: Optional[Mapping[str, Any]],
    status: Optional[int],
    default: str = DEFAULT_ERROR_MESSAGE,
    status_messages: Optional[Mapping[int, str]] = None,
) -> str:
    """
    Pick the message to show for a failed call:
    API message (error.message, then message) when non-blank,
    else the per-status fallback, else `default`.
    """
    api_message = None
    if data:
        err = data.get("error")
        if isinstance(err, dict):
            api_message = err.get("message")
        if not (isinstance(api_message, str) and api_message.strip()):
            api_message = data.get("message")

    if isinstance(api_message, str) and api_message.strip():
        return api_message

    table = status_messages if status_messages is not None else STATUS_ERROR_MESSAGES
    if status is not None and status in table:
        return table[status]
    return default


def _extract_error_code(data: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not data:
        return None
    err = data.get("error")
    if isinstance(err, dict) and err.get("code"):
        return str(err["code"])
    if data.get("errorCode"):
        return str(data["errorCode"])
    return None


class ColdStoreApiClient:
    """
    Thin wrapper over requests for the remote cold-storage API.
    One instance per request context; carries the store-admin bearer token.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ApiError("COLDSTORE_API_BASE_URL is not set")
        base = base_url.rstrip("/")
        # Accept both https://host and https://host/api/v1
        if not base.endswith(API_PREFIX):
            base = base + API_PREFIX
        self.base_url = base
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    # -----------------------------
    # Core
    # -----------------------------
    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        default_error: str = DEFAULT_ERROR_MESSAGE,
        status_messages: Optional[Mapping[int, str]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        try:
            resp = self.session.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s network error: %s", method, path, e)
            raise ApiNetworkError("Network error. Please check your connection and try again.") from e

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        data = _safe_json(resp)

        if resp.status_code >= 400:
            message = extract_error_message(data, resp.status_code, default_error, status_messages)
            code = _extract_error_code(data)
            logger.warning("%s %s failed (%s): %s", method, path, resp.status_code, message)
            if resp.status_code == 401:
                raise ApiAuthError(message, status=401, code=code)
            raise ApiError(message, status=resp.status_code, code=code)

        if data is None:
            snippet = (resp.text or "").strip().replace("\n", " ")[:240]
            raise ApiError(
                f"API returned non-JSON response ({resp.status_code}): {snippet}",
                status=resp.status_code,
            )

        return data

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kw) -> Dict[str, Any]:
        return self.request("GET", path, params=params, **kw)

    def post(self, path: str, payload: Optional[Any] = None, **kw) -> Dict[str, Any]:
        return self.request("POST", path, json=payload, **kw)

    def put(self, path: str, payload: Optional[Any] = None, **kw) -> Dict[str, Any]:
        return self.request("PUT", path, json=payload, **kw)

    def delete(self, path: str, **kw) -> Dict[str, Any]:
        return self.request("DELETE", path, **kw)


# -----------------------------
# Envelope helpers
# -----------------------------
def unwrap_success(data: Dict[str, Any], default_error: str) -> Any:
    """`{success, data, message}` envelope -> data, or ApiError."""
    if not data.get("success") or data.get("data") is None:
        raise ApiError(data.get("message") or default_error)
    return data["data"]


def unwrap_status(data: Dict[str, Any], default_error: str) -> Any:
    """`{status: "Success", data}` envelope -> data, or ApiError."""
    if data.get("status") != "Success" or data.get("data") is None:
        raise ApiError(data.get("message") or default_error)
    return data["data"]
