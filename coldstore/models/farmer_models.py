# coldstore/models/farmer_models.py
from __future__ import annotations

import re
from typing import Optional

from pydantic import Field, field_validator

from coldstore.models.common import ApiModel, RequestBody
from coldstore.models.gate_pass_models import FarmerRef

# 10-digit Indian mobile, starting 6-9
MOBILE_RE = re.compile(r"^[6-9]\d{9}$")


def _check_mobile(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not MOBILE_RE.match(v):
        raise ValueError("Enter a valid 10-digit mobile number")
    return v


class FarmerStorageLink(ApiModel):
    id: str = Field("", alias="_id")
    farmerId: FarmerRef = Field(default_factory=FarmerRef)
    coldStorageId: str = ""
    accountNumber: int = 0
    costPerBag: float = 0
    isActive: bool = True
    notes: Optional[str] = None

    @property
    def name(self) -> str:
        return self.farmerId.name

    @property
    def mobile_number(self) -> str:
        return self.farmerId.mobileNumber


class QuickRegisterFarmerInput(RequestBody):
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    mobileNumber: str
    imageUrl: Optional[str] = None
    coldStorageId: str = Field(..., min_length=1)
    linkedById: str = Field(..., min_length=1)
    accountNumber: int = Field(..., ge=1)
    costPerBag: float = Field(0, ge=0)
    openingBalance: float = 0

    @field_validator("mobileNumber")
    @classmethod
    def _valid_mobile(cls, v):
        return _check_mobile(v)


class UpdateFarmerStorageLinkInput(RequestBody):
    name: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    mobileNumber: Optional[str] = None
    imageUrl: Optional[str] = None
    accountNumber: Optional[int] = Field(None, ge=1)
    isActive: Optional[bool] = None
    notes: Optional[str] = None
    linkedById: Optional[str] = None
    openingBalance: Optional[float] = None
    costPerBag: Optional[float] = Field(None, ge=0)

    @field_validator("mobileNumber")
    @classmethod
    def _valid_mobile(cls, v):
        return _check_mobile(v)


class LinkFarmerInput(RequestBody):
    farmerId: str = Field(..., min_length=1)
    accountNumber: int = Field(..., ge=1)
    costPerBag: float = Field(0, ge=0)
    openingBalance: Optional[float] = None


class CheckMobileInput(RequestBody):
    mobileNumber: str

    @field_validator("mobileNumber")
    @classmethod
    def _valid_mobile(cls, v):
        return _check_mobile(v)
