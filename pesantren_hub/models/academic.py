"""
models/academic.py
------------------
Students, teachers and the per-pesantren master-data lists.
"""

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from pesantren_hub.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from pesantren_hub.models.pesantren import PesantrenScopedMixin


class MasterDataMixin(UUIDPrimaryKeyMixin, PesantrenScopedMixin, TimestampMixin):
    """Every master-data list is a tenant-scoped list of names."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Kelas(Base, MasterDataMixin):
    __tablename__ = "kelas"


class MataPelajaran(Base, MasterDataMixin):
    __tablename__ = "mata_pelajaran"


class Ruangan(Base, MasterDataMixin):
    __tablename__ = "ruangan"


class GrupPilihan(Base, MasterDataMixin):
    __tablename__ = "grup_pilihan"


class Santri(Base, UUIDPrimaryKeyMixin, PesantrenScopedMixin, TimestampMixin):
    __tablename__ = "santri"

    nis: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    class_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("kelas.id", ondelete="SET NULL")
    )
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    transaction_pin: Mapped[Optional[str]] = mapped_column(String(255))
    photo_url: Mapped[str] = mapped_column(String(1024), default="")

    def __repr__(self) -> str:
        return f"<Santri id={self.id} nis={self.nis}>"


class Ustadz(Base, UUIDPrimaryKeyMixin, PesantrenScopedMixin, TimestampMixin):
    __tablename__ = "ustadz"

    profile_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="SET NULL"), index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    subject: Mapped[Optional[str]] = mapped_column(String(255))
    photo_url: Mapped[str] = mapped_column(String(1024), default="")

    def __repr__(self) -> str:
        return f"<Ustadz id={self.id} email={self.email}>"
