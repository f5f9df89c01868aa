# coldstore/services/accounting/balances.py

from typing import Any, Dict, Iterable, List, Union

from coldstore.models.accounting_models import (
    DEBIT_NORMAL_TYPES,
    Ledger,
    LedgerStatement,
    LedgerStatementLine,
    Voucher,
)
from coldstore.models.common import date_sort_key

LedgerLike = Union[Ledger, Dict[str, Any]]
VoucherLike = Union[Voucher, Dict[str, Any]]


def _as_ledger(l: LedgerLike) -> Ledger:
    return l if isinstance(l, Ledger) else Ledger.model_validate(l)


def _as_voucher(v: VoucherLike) -> Voucher:
    return v if isinstance(v, Voucher) else Voucher.model_validate(v)


def signed_movement(ledger_type: str, debit: float, credit: float) -> float:
    """Asset/Expense grow with debits; Liability/Income/Equity grow with credits."""
    if ledger_type in DEBIT_NORMAL_TYPES:
        return debit - credit
    return credit - debit


def compute_ledger_balances(ledgers: Iterable[LedgerLike], vouchers: Iterable[VoucherLike]) -> Dict[str, float]:
    ledgers = [_as_ledger(l) for l in ledgers]
    debits: Dict[str, float] = {}
    credits: Dict[str, float] = {}
    for v in (_as_voucher(x) for x in vouchers):
        debits[v.debitLedger.id] = debits.get(v.debitLedger.id, 0) + v.amount
        credits[v.creditLedger.id] = credits.get(v.creditLedger.id, 0) + v.amount

    return {
        l.id: l.openingBalance + signed_movement(l.type, debits.get(l.id, 0), credits.get(l.id, 0))
        for l in ledgers
    }


def ledger_statement(ledger: LedgerLike, vouchers: Iterable[VoucherLike]) -> LedgerStatement:
    """
    Chronological statement of one ledger: each voucher touching it becomes a
    debit or credit line with the running balance after it.
    """
    ledger = _as_ledger(ledger)
    mine = [v for v in (_as_voucher(x) for x in vouchers) if ledger.id in (v.debitLedger.id, v.creditLedger.id)]
    mine.sort(key=lambda v: date_sort_key(v.date))

    balance = ledger.openingBalance
    total_debit = total_credit = 0.0
    lines: List[LedgerStatementLine] = []
    for v in mine:
        is_debit = v.debitLedger.id == ledger.id
        debit = v.amount if is_debit else 0.0
        credit = 0.0 if is_debit else v.amount
        balance += signed_movement(ledger.type, debit, credit)
        total_debit += debit
        total_credit += credit
        lines.append(
            LedgerStatementLine(
                date=v.date,
                voucherNumber=v.voucherNumber,
                # the other side of the entry
                particulars=(v.creditLedger.name if is_debit else v.debitLedger.name) or "-",
                narration=v.narration,
                debit=debit,
                credit=credit,
                balance=balance,
            )
        )

    return LedgerStatement(
        ledger=ledger,
        lines=lines,
        openingBalance=ledger.openingBalance,
        totalDebit=total_debit,
        totalCredit=total_credit,
        closingBalance=balance,
    )
