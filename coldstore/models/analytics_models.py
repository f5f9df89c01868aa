# coldstore/models/analytics_models.py
from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator

from coldstore.models.common import ApiModel
from coldstore.models.gate_pass_models import DELIVERY, RECEIPT, GatePass


# ---------------- storage summary ----------------
class SizeQuantity(ApiModel):
    size: str = ""
    initialQuantity: int = 0
    currentQuantity: int = 0

    @field_validator("size", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("initialQuantity", "currentQuantity", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class VarietyStockSummary(ApiModel):
    variety: str = ""
    sizes: List[SizeQuantity] = Field(default_factory=list)

    @field_validator("variety", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("sizes", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


class TotalInventory(ApiModel):
    initial: int = 0
    current: int = 0

    @field_validator("initial", "current", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class TopVariety(ApiModel):
    variety: str = ""
    currentQuantity: int = 0

    @field_validator("variety", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("currentQuantity", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class TopSize(ApiModel):
    size: str = ""
    currentQuantity: int = 0

    @field_validator("size", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("currentQuantity", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class StorageSummary(ApiModel):
    stockSummary: List[VarietyStockSummary] = Field(default_factory=list)
    totalInventory: TotalInventory = Field(default_factory=TotalInventory)
    topVariety: Optional[TopVariety] = None
    topSize: Optional[TopSize] = None


# ---------------- top farmers ----------------
class ChartPoint(ApiModel):
    name: str = ""
    value: float = 0

    @field_validator("name", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("value", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class TopFarmersChartData(ApiModel):
    byCurrentQuantity: List[ChartPoint] = Field(default_factory=list)
    byInitialQuantity: List[ChartPoint] = Field(default_factory=list)
    byQuantityRemoved: List[ChartPoint] = Field(default_factory=list)


# ---------------- variety breakdown ----------------
class VarietyBreakdownFarmer(ApiModel):
    farmerName: str = ""
    initialQuantity: int = 0
    currentQuantity: int = 0
    quantityRemoved: int = 0

    @field_validator("farmerName", mode="before")
    @classmethod
    def _none_name(cls, v):
        return v or ""

    @field_validator("initialQuantity", "currentQuantity", "quantityRemoved", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class VarietyBreakdownSize(ApiModel):
    size: str = ""
    initialQuantity: int = 0
    currentQuantity: int = 0
    quantityRemoved: int = 0
    farmerBreakdown: List[VarietyBreakdownFarmer] = Field(default_factory=list)

    @field_validator("size", mode="before")
    @classmethod
    def _none_size(cls, v):
        return v or ""

    @field_validator("initialQuantity", "currentQuantity", "quantityRemoved", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v

    @field_validator("farmerBreakdown", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


class VarietyBreakdown(ApiModel):
    variety: str = ""
    sizes: List[VarietyBreakdownSize] = Field(default_factory=list)

    @field_validator("variety", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("sizes", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


# ---------------- reports ----------------
class ReportFarmer(ApiModel):
    name: str = ""
    mobileNumber: str = ""
    address: str = ""
    accountNumber: Optional[int] = None

    @field_validator("name", "mobileNumber", "address", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)


def _tag(entries, kind: str):
    # report payloads omit `type`; the list they sit in decides it
    return [dict(e, type=kind) if isinstance(e, dict) else e for e in (entries or [])]


class _IncomingOutgoing(ApiModel):
    incoming: List[GatePass] = Field(default_factory=list)
    outgoing: List[GatePass] = Field(default_factory=list)

    @field_validator("incoming", mode="before")
    @classmethod
    def _as_receipts(cls, v):
        return _tag(v, RECEIPT)

    @field_validator("outgoing", mode="before")
    @classmethod
    def _as_deliveries(cls, v):
        return _tag(v, DELIVERY)


class ReportFarmerBlock(_IncomingOutgoing):
    farmer: ReportFarmer = Field(default_factory=ReportFarmer)


class ReportsData(_IncomingOutgoing):
    """Either grouped (`farmers` set) or flat (`incoming`/`outgoing` set)."""

    from_: str = Field("", alias="from")
    to: str = ""
    groupedByFarmer: bool = False
    farmers: Optional[List[ReportFarmerBlock]] = None

    @property
    def is_grouped(self) -> bool:
        return self.farmers is not None
