# coldstore/models/accounting_models.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from coldstore.models.common import ApiModel, RequestBody, to_payload_date

LedgerType = Literal["Asset", "Liability", "Income", "Expense", "Equity"]
LEDGER_TYPES = ("Asset", "Liability", "Income", "Expense", "Equity")

# Debit-normal ledgers grow with debits; the rest grow with credits
DEBIT_NORMAL_TYPES = {"Asset", "Expense"}


class Ledger(ApiModel):
    id: str = Field("", alias="_id")
    name: str = ""
    type: LedgerType = "Asset"
    subType: str = ""
    category: str = ""
    openingBalance: float = 0
    balance: float = 0
    closingBalance: Optional[float] = None
    coldStorageId: str = ""
    farmerStorageLinkId: Optional[str] = None
    isSystemLedger: bool = False
    transactionCount: int = 0

    @field_validator("openingBalance", "balance", mode="before")
    @classmethod
    def _none_zero(cls, v):
        return 0 if v is None else v


class VoucherLedgerRef(ApiModel):
    id: str = Field("", alias="_id")
    name: str = ""


class Voucher(ApiModel):
    id: str = Field("", alias="_id")
    type: str = ""
    voucherNumber: int = 0
    date: str = ""
    debitLedger: VoucherLedgerRef = Field(default_factory=VoucherLedgerRef)
    creditLedger: VoucherLedgerRef = Field(default_factory=VoucherLedgerRef)
    amount: float = 0
    narration: Optional[str] = None
    farmerStorageLinkId: Optional[str] = None

    @field_validator("debitLedger", "creditLedger", mode="before")
    @classmethod
    def _id_only_ref(cls, v):
        if isinstance(v, str):
            return {"_id": v}
        return v or {}


class BalanceSheet(ApiModel):
    assets: Dict[str, Any] = Field(default_factory=dict)
    liabilitiesAndEquity: Dict[str, Any] = Field(default_factory=dict)


# ---------------- request bodies ----------------
class LedgerCreate(RequestBody):
    name: str = Field(..., min_length=1)
    type: LedgerType
    subType: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    openingBalance: Optional[float] = None


class LedgerUpdate(RequestBody):
    name: Optional[str] = Field(None, min_length=1)
    subType: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    openingBalance: Optional[float] = None


class VoucherCreate(RequestBody):
    date: str
    debitLedger: str = Field(..., min_length=1)
    creditLedger: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    narration: Optional[str] = None
    farmerStorageLinkId: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v):
        return to_payload_date(v)

    @model_validator(mode="after")
    def _distinct_ledgers(self):
        if self.debitLedger == self.creditLedger:
            raise ValueError("Debit and credit ledger must be different")
        return self


class VoucherUpdate(RequestBody):
    date: Optional[str] = None
    debitLedger: Optional[str] = Field(None, min_length=1)
    creditLedger: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, gt=0)
    narration: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v):
        return None if v in (None, "") else to_payload_date(v)

    @model_validator(mode="after")
    def _distinct_ledgers(self):
        if self.debitLedger and self.debitLedger == self.creditLedger:
            raise ValueError("Debit and credit ledger must be different")
        return self


class LedgerStatementLine(ApiModel):
    date: str
    voucherNumber: int
    particulars: str
    narration: Optional[str] = None
    debit: float = 0
    credit: float = 0
    balance: float = 0


class LedgerStatement(ApiModel):
    ledger: Ledger
    lines: List[LedgerStatementLine] = Field(default_factory=list)
    openingBalance: float = 0
    totalDebit: float = 0
    totalCredit: float = 0
    closingBalance: float = 0
