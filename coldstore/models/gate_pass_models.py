# coldstore/models/gate_pass_models.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import Field, field_validator, model_validator

from coldstore.models.common import ApiModel, RequestBody, to_payload_date

RECEIPT = "RECEIPT"
DELIVERY = "DELIVERY"


# ---------------- records from the API ----------------
class Location(ApiModel):
    chamber: str = ""
    floor: str = ""
    row: str = ""

    @field_validator("chamber", "floor", "row", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    def key(self) -> str:
        return f"{self.chamber}|{self.floor}|{self.row}"


class BagSize(ApiModel):
    name: str = ""
    initialQuantity: int = 0
    currentQuantity: int = 0
    location: Location = Field(default_factory=Location)

    @field_validator("name", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("initialQuantity", "currentQuantity", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v

    @field_validator("location", mode="before")
    @classmethod
    def _none_location(cls, v):
        return v or {}


class FarmerRef(ApiModel):
    id: str = Field("", alias="_id")
    name: str = ""
    address: str = ""
    mobileNumber: str = ""

    @field_validator("name", "address", "mobileNumber", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)


class FarmerLinkRef(ApiModel):
    id: str = Field("", alias="_id")
    farmerId: FarmerRef = Field(default_factory=FarmerRef)
    accountNumber: Optional[int] = None


class CreatedBy(ApiModel):
    id: str = Field("", alias="_id")
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)


class OrderDetail(ApiModel):
    size: str = ""
    quantityAvailable: int = 0
    quantityIssued: int = 0
    location: Optional[Location] = None
    incomingGatePassNo: Optional[int] = None

    @field_validator("size", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("quantityAvailable", "quantityIssued", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class OutgoingAllocation(ApiModel):
    size: str = ""
    quantityToAllocate: int = 0

    @field_validator("size", mode="before")
    @classmethod
    def _none_to_blank(cls, v):
        return "" if v is None else str(v)

    @field_validator("quantityToAllocate", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class OutgoingIncomingEntry(ApiModel):
    incomingGatePassId: str = ""
    variety: Optional[str] = None
    gatePassNo: Optional[int] = None
    allocations: List[OutgoingAllocation] = Field(default_factory=list)

    @field_validator("allocations", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


class IncomingGatePassSnapshot(ApiModel):
    id: str = Field("", alias="_id")
    gatePassNo: int = 0
    variety: Optional[str] = None
    bagSizes: List[BagSize] = Field(default_factory=list)

    @field_validator("gatePassNo", mode="before")
    @classmethod
    def _none_number(cls, v):
        return 0 if v is None else v

    @field_validator("bagSizes", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []


class GatePass(ApiModel):
    """
    Daybook entry. RECEIPT carries bagSizes; DELIVERY carries orderDetails
    and/or incomingGatePassEntries (new shape) / incomingGatePassSnapshots (legacy).
    """

    id: str = Field("", alias="_id")
    farmerStorageLinkId: FarmerLinkRef = Field(default_factory=FarmerLinkRef)
    createdBy: CreatedBy = Field(default_factory=CreatedBy)
    gatePassNo: int = 0
    date: str = ""
    type: str = RECEIPT
    variety: Optional[str] = None
    truckNumber: Optional[str] = None
    bagSizes: List[BagSize] = Field(default_factory=list)
    orderDetails: List[OrderDetail] = Field(default_factory=list)
    incomingGatePassEntries: List[OutgoingIncomingEntry] = Field(default_factory=list)
    incomingGatePassSnapshots: List[IncomingGatePassSnapshot] = Field(default_factory=list)
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    status: str = ""
    remarks: str = ""
    manualParchiNumber: Optional[str] = None
    createdAt: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _infer_type(cls, data):
        # older records carry no type; order details mean a delivery
        if isinstance(data, dict) and not data.get("type"):
            data = dict(data, type=DELIVERY if data.get("orderDetails") else RECEIPT)
        return data

    @field_validator("farmerStorageLinkId", "createdBy", mode="before")
    @classmethod
    def _id_only_ref(cls, v):
        # the API sends a bare id when the reference is not populated
        if isinstance(v, str):
            return {"_id": v}
        return v or {}

    @field_validator("manualParchiNumber", mode="before")
    @classmethod
    def _stringify(cls, v):
        return v if v is None or isinstance(v, str) else str(v)

    @field_validator("remarks", "status", "date", mode="before")
    @classmethod
    def _blank_text(cls, v):
        return "" if v is None else str(v)

    @field_validator("gatePassNo", mode="before")
    @classmethod
    def _none_number(cls, v):
        return 0 if v is None else v

    @field_validator("bagSizes", "orderDetails", "incomingGatePassEntries", "incomingGatePassSnapshots", mode="before")
    @classmethod
    def _none_list(cls, v):
        return v or []

    @property
    def is_receipt(self) -> bool:
        return self.type == RECEIPT

    @property
    def is_delivery(self) -> bool:
        return self.type == DELIVERY

    @property
    def farmer_name(self) -> str:
        return self.farmerStorageLinkId.farmerId.name

    @property
    def account_number(self) -> Optional[int]:
        return self.farmerStorageLinkId.accountNumber

    def total_bags(self) -> int:
        if self.is_receipt:
            return sum(b.initialQuantity for b in self.bagSizes)
        return sum(d.quantityIssued for d in self.orderDetails)


class Pagination(ApiModel):
    currentPage: int = 1
    totalPages: int = 0
    totalItems: int = 0
    itemsPerPage: int = 10
    hasNextPage: bool = False
    hasPreviousPage: bool = False
    nextPage: Optional[int] = None
    previousPage: Optional[int] = None


# ---------------- request bodies ----------------
class LocationBody(RequestBody):
    chamber: str = Field(..., min_length=1)
    floor: str = Field(..., min_length=1)
    row: str = Field(..., min_length=1)


class BagSizeBody(RequestBody):
    name: str = Field(..., min_length=1)
    initialQuantity: int = Field(..., ge=0)
    currentQuantity: int = Field(..., ge=0)
    location: LocationBody
    paltaiLocation: Optional[LocationBody] = None


class IncomingGatePassCreate(RequestBody):
    farmerStorageLinkId: str = Field(..., min_length=1)
    date: str
    variety: str = Field(..., min_length=1)
    truckNumber: Optional[str] = None
    bagSizes: List[BagSizeBody] = Field(..., min_length=1)
    remarks: str = Field("", max_length=500)
    manualParchiNumber: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v):
        return to_payload_date(v)


class IncomingGatePassUpdate(RequestBody):
    date: Optional[str] = None
    variety: Optional[str] = Field(None, min_length=1)
    truckNumber: Optional[str] = None
    bagSizes: Optional[List[BagSizeBody]] = Field(None, min_length=1)
    remarks: Optional[str] = Field(None, max_length=500)
    manualParchiNumber: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v):
        return None if v in (None, "") else to_payload_date(v)


class AllocationBody(RequestBody):
    size: str = Field(..., min_length=1)
    quantityToAllocate: int = Field(..., ge=1)
    location: Location = Field(default_factory=Location)


class IncomingEntryBody(RequestBody):
    incomingGatePassId: str = Field(..., min_length=1)
    variety: str = Field(..., min_length=1)
    allocations: List[AllocationBody] = Field(..., min_length=1)


class OutgoingGatePassCreate(RequestBody):
    farmerStorageLinkId: str = Field(..., min_length=1)
    gatePassNo: int = Field(..., ge=1)
    date: str
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    truckNumber: Optional[str] = None
    manualParchiNumber: Optional[int] = Field(None, gt=0)
    incomingGatePasses: List[IncomingEntryBody] = Field(..., min_length=1)
    remarks: str = Field("", max_length=500)

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v):
        return to_payload_date(v)

    @field_validator("manualParchiNumber", mode="before")
    @classmethod
    def _blank_parchi(cls, v: Union[str, int, None]):
        if isinstance(v, str) and not v.strip():
            return None
        return v
