"""
models/pesantren.py
-------------------
Pesantren (tenant) ORM models.

Each pesantren is an isolated organisational unit. All data belonging to a
pesantren is scoped by pesantren_id at the query level; every tenant-scoped
query in the service layer filters on it.
"""

from datetime import date
from typing import Optional

from sqlalchemy import BigInteger, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from pesantren_hub.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PesantrenScopedMixin:
    """Adds the mandatory pesantren_id foreign key."""

    @declared_attr
    def pesantren_id(cls) -> Mapped[str]:
        return mapped_column(
            String(36),
            ForeignKey("pesantren.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class Pesantren(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "pesantren"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address: Mapped[Optional[str]] = mapped_column(Text)
    contact: Mapped[Optional[str]] = mapped_column(String(64))
    logo_url: Mapped[str] = mapped_column(String(1024), default="")
    document_url: Mapped[str] = mapped_column(String(1024), default="")
    santri_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ustadz_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    subscription_until: Mapped[Optional[date]] = mapped_column(Date)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text)
    # The owning account; references the identity because the profile row
    # itself points back at this table through tenant_id.
    admin_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("auth_identities.id", ondelete="SET NULL"),
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Pesantren id={self.id} name={self.name} status={self.status}>"


class PesantrenFinancials(Base, UUIDPrimaryKeyMixin, PesantrenScopedMixin, TimestampMixin):
    __tablename__ = "pesantren_financials"

    available_balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    pending_balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    monthly_income: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    last_withdrawal: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class PesantrenBankAccount(Base, UUIDPrimaryKeyMixin, PesantrenScopedMixin, TimestampMixin):
    __tablename__ = "pesantren_bank_accounts"

    bank_name: Mapped[str] = mapped_column(String(128), nullable=False)
    account_holder: Mapped[str] = mapped_column(String(255), nullable=False)
    account_number: Mapped[str] = mapped_column(String(64), nullable=False)
