"""
schemas/finance.py
------------------
Billing, financial dashboards, monetization settings and withdrawals.
"""

import math
from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from pesantren_hub.schemas.common import CamelModel, Page, PartialUpdate


# ── Tagihan ───────────────────────────────────────────────────────────────────

class TagihanRead(CamelModel):
    id: str
    title: str
    amount: int
    total_targets: int
    paid_count: int
    unpaid_amount: int
    due_date: Optional[date] = None
    created_at: Optional[datetime] = None


class TagihanCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    amount: int = Field(..., ge=0)
    total_targets: int = Field(default=0, ge=0)
    due_date: Optional[date] = None


class TagihanUpdate(PartialUpdate):
    NULLABLE = frozenset({"due_date"})

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[int] = Field(default=None, ge=0)
    total_targets: Optional[int] = Field(default=None, ge=0)
    paid_count: Optional[int] = Field(default=None, ge=0)
    due_date: Optional[date] = None


# ── Pesantren financials ──────────────────────────────────────────────────────

class FinancialSummary(CamelModel):
    available_balance: int
    pending_balance: int
    monthly_income: int
    last_withdrawal: int


class BankAccountRead(CamelModel):
    id: str
    bank_name: str
    account_holder: str
    account_number: str


class TransactionRead(CamelModel):
    id: str
    date: datetime
    description: Optional[str] = None
    type: str
    amount: int


class PesantrenFinancialsRead(CamelModel):
    summary: FinancialSummary
    bank_accounts: List[BankAccountRead]
    transactions: Page[TransactionRead]


# ── Platform financials ───────────────────────────────────────────────────────

class PlatformTransactionRead(CamelModel):
    id: str
    pesantren_name: str = "Unknown"
    type: str
    amount: int
    timestamp: datetime
    status: str = "completed"


class PlatformFinancialSummary(CamelModel):
    total_volume: int
    total_pendapatan: int
    total_top_up_bulanan: int
    total_withdraw_bulanan: int


class PlatformFinancialsRead(CamelModel):
    summary: PlatformFinancialSummary
    transactions: Page[PlatformTransactionRead]


# ── Monetization ──────────────────────────────────────────────────────────────

class MonetizationSettingsRead(CamelModel):
    tagihan_fee: float
    topup_fee: float
    koperasi_commission: float


class MonetizationSettingsSave(CamelModel):
    tagihan_fee: float = 0
    topup_fee: float = 0
    koperasi_commission: float = 0

    @field_validator("tagihan_fee", "topup_fee", "koperasi_commission", mode="before")
    @classmethod
    def coerce_number(cls, v):
        """Anything that is not a finite number is stored as 0."""
        try:
            number = float(v)
        except (TypeError, ValueError):
            return 0
        return number if math.isfinite(number) else 0


# ── Withdrawals ───────────────────────────────────────────────────────────────

class WithdrawalBankAccount(CamelModel):
    bank_name: str = ""
    account_holder: str = ""
    account_number: str = ""


class WithdrawalRequestRead(CamelModel):
    id: str
    tenant_id: str
    tenant_name: str = "Unknown"
    request_date: datetime
    amount: int
    status: str
    reason: Optional[str] = None
    processed_at: Optional[datetime] = None
    bank_account: WithdrawalBankAccount = WithdrawalBankAccount()


class WithdrawalStats(CamelModel):
    pending_count: int
    pending_amount: int
    processed_today: int


class WithdrawalPage(Page[WithdrawalRequestRead]):
    stats: WithdrawalStats


class WithdrawalCreate(CamelModel):
    amount: int = Field(..., gt=0)
    bank_account_id: str
