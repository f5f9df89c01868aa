# coldstore/models/common.py
from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DOTTED_DATE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")


class ApiModel(BaseModel):
    """Lenient base for records returned by the API."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RequestBody(BaseModel):
    """Strict-ish base for bodies we send; serialised by alias."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, str_strip_whitespace=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def to_payload_date(value: Any) -> str:
    """
    Normalise a form date to the API's midnight-UTC ISO string.
    Accepts YYYY-MM-DD (optionally with a time part), dd.mm.yyyy, date or datetime.
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return f"{value.isoformat()}T00:00:00.000Z"

    s = str(value or "").strip()
    if not s:
        raise ValueError("Date is required")

    day_part = s.split("T")[0]
    if _ISO_DATE.match(day_part):
        date.fromisoformat(day_part)  # range check
        return f"{day_part}T00:00:00.000Z"

    m = _DOTTED_DATE.match(s)
    if m:
        d, mo, y = (int(x) for x in m.groups())
        return f"{date(y, mo, d).isoformat()}T00:00:00.000Z"

    raise ValueError(f"Unrecognised date: {s!r}")


def parse_api_date(value: Optional[str]) -> Optional[datetime]:
    """ISO string from the API -> datetime, or None when missing/garbled."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def first_validation_message(exc) -> str:
    """First human message out of a pydantic ValidationError."""
    errors = exc.errors()
    if not errors:
        return "Validation failed"
    msg = errors[0].get("msg") or "Validation failed"
    # pydantic prefixes custom ValueError messages
    return msg.removeprefix("Value error, ")


def date_sort_key(value: Optional[str]) -> Tuple[bool, datetime]:
    """Ascending by date; undated records sort last."""
    dt = parse_api_date(value)
    if dt is not None and dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt is None, dt or datetime.min.replace(tzinfo=timezone.utc))
