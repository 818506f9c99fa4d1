"""
models/account.py
-----------------
Credential identities and the profiles attached to them.

auth_identities belongs to the identity provider; the facade only reads and
updates profiles. A profile shares its primary key with its identity.

Role design:
  - 'platform_admin':  Operates the whole platform, belongs to no pesantren.
  - 'pesantren_admin': Manages one pesantren (tenant_id set).
  - 'ustadz':          Teacher inside one pesantren.
"""

from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from pesantren_hub.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class AccountRole(str, PyEnum):
    platform_admin = "platform_admin"
    pesantren_admin = "pesantren_admin"
    ustadz = "ustadz"


class AccountStatus(str, PyEnum):
    pending = "pending"
    active = "active"
    rejected = "rejected"


class AuthIdentity(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "auth_identities"

    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<AuthIdentity id={self.id} email={self.email}>"


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("auth_identities.id", ondelete="CASCADE"),
        primary_key=True,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255))
    role: Mapped[Optional[str]] = mapped_column(String(32))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccountStatus.active.value
    )
    tenant_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("pesantren.id", ondelete="SET NULL"),
        index=True,
    )
    pesantren_name: Mapped[Optional[str]] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<Profile id={self.id} role={self.role} status={self.status}>"
