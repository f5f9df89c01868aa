# coldstore/models/store_admin_models.py
from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import Field, field_validator

from coldstore.models.common import ApiModel, RequestBody
from coldstore.models.gate_pass_models import GatePass


class ColdStorage(ApiModel):
    id: str = Field("", alias="_id")
    name: str = ""
    address: str = ""
    mobileNumber: str = ""
    capacity: int = 0
    imageUrl: Optional[str] = None
    plan: str = ""
    isPaid: bool = False
    isActive: bool = True
    # populated by the login endpoint: bare id or the full preferences document
    preferencesId: Optional[Union[str, dict]] = None


class StoreAdmin(ApiModel):
    id: str = Field("", alias="_id")
    name: str = ""
    mobileNumber: str = ""
    role: str = ""
    isVerified: bool = False
    coldStorageId: ColdStorage = Field(default_factory=ColdStorage)

    @field_validator("coldStorageId", mode="before")
    @classmethod
    def _id_only_storage(cls, v):
        if isinstance(v, str):
            return {"_id": v}
        return v or {}


class LoginInput(RequestBody):
    mobileNumber: str = Field(..., min_length=10, max_length=10)
    password: str = Field(..., min_length=1)


# ---------------- preferences ----------------
class Commodity(ApiModel):
    name: str = ""
    varieties: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)

    @field_validator("varieties", "sizes", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


class Preferences(ApiModel):
    id: str = Field("", alias="_id")
    commodities: List[Commodity] = Field(default_factory=list)
    reportFormat: str = "default"
    showFinances: bool = True
    labourCost: float = 0

    @field_validator("commodities", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []

    def bag_sizes(self) -> List[str]:
        """Size columns, in configured order, de-duplicated across commodities."""
        out: List[str] = []
        for c in self.commodities:
            for s in c.sizes:
                if s and s not in out:
                    out.append(s)
        return out

    def varieties(self) -> List[str]:
        out: List[str] = []
        for c in self.commodities:
            for v in c.varieties:
                if v and v not in out:
                    out.append(v)
        return out


# ---------------- edit history ----------------
class EditedBy(ApiModel):
    id: str = Field("", alias="_id")
    name: str = ""


class EditHistoryEntry(ApiModel):
    id: str = Field("", alias="_id")
    entityType: str = ""
    documentId: str = ""
    editedBy: EditedBy = Field(default_factory=EditedBy)
    editedAt: Optional[str] = None
    action: str = ""
    changeSummary: str = ""
    snapshotBefore: Optional[GatePass] = None
    snapshotAfter: Optional[GatePass] = None


# ---------------- daybook ----------------
DAYBOOK_TYPES = ("all", "incoming", "outgoing")
DAYBOOK_SORTS = ("latest", "oldest")
MIN_LIMIT = 1
MAX_LIMIT = 100


class DaybookQuery(ApiModel):
    """Query string for the daybook; out-of-range page/limit are clamped, not rejected."""

    type: Literal["all", "incoming", "outgoing"] = "all"
    sortBy: Literal["latest", "oldest"] = "latest"
    page: int = 1
    limit: int = 10

    @field_validator("page", mode="before")
    @classmethod
    def _clamp_page(cls, v):
        if v in (None, ""):
            return 1
        return max(1, int(float(v)))

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, v):
        if v in (None, ""):
            return 10
        return max(MIN_LIMIT, min(MAX_LIMIT, int(float(v))))
