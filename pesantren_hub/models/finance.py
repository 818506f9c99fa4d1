"""
models/finance.py
-----------------
Billing, ledgers, cooperative sales, platform fees and withdrawals.

Amounts are whole rupiah stored as BIGINT.
"""

from datetime import date, datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import BigInteger, Date, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from pesantren_hub.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from pesantren_hub.models.pesantren import PesantrenScopedMixin


class WithdrawalStatus(str, PyEnum):
    pending = "pending"
    completed = "completed"
    rejected = "rejected"


class Tagihan(Base, UUIDPrimaryKeyMixin, PesantrenScopedMixin, TimestampMixin):
    __tablename__ = "tagihan"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    total_targets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    paid_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    due_date: Mapped[Optional[date]] = mapped_column(Date)


class Transaction(Base, UUIDPrimaryKeyMixin, PesantrenScopedMixin, TimestampMixin):
    """Tenant ledger entry (payments, top-ups, withdrawals)."""

    __tablename__ = "transactions"

    type: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)


class Koperasi(Base, UUIDPrimaryKeyMixin, PesantrenScopedMixin, TimestampMixin):
    __tablename__ = "koperasi"

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class KoperasiTransaction(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "koperasi_transactions"

    koperasi_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("koperasi.id", ondelete="CASCADE"), nullable=False, index=True
    )
    total: Mapped[int] = mapped_column(BigInteger, nullable=False)


class PlatformTransaction(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Money movement seen by the platform, with the fee it earned."""

    __tablename__ = "platform_transactions"

    pesantren_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("pesantren.id", ondelete="SET NULL"), index=True
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    fee_amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class MonetizationSettings(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Single-row table with the platform's fee configuration."""

    __tablename__ = "monetization_settings"

    tagihan_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    topup_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    koperasi_commission: Mapped[float] = mapped_column(Float, nullable=False, default=0)


class WithdrawalRequest(Base, UUIDPrimaryKeyMixin, PesantrenScopedMixin):
    __tablename__ = "withdrawal_requests"

    bank_account_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("pesantren_bank_accounts.id", ondelete="SET NULL")
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=WithdrawalStatus.pending.value, index=True
    )
    reason: Mapped[Optional[str]] = mapped_column(Text)
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<WithdrawalRequest id={self.id} amount={self.amount} status={self.status}>"
