"""
models/__init__.py
------------------
Re-export all models so create_tables.py (and Alembic, when added) can
discover every table via a single import:

    from pesantren_hub.models import Base
"""

from pesantren_hub.db.base import Base
from pesantren_hub.models.account import AccountRole, AccountStatus, AuthIdentity, Profile
from pesantren_hub.models.pesantren import Pesantren, PesantrenBankAccount, PesantrenFinancials
from pesantren_hub.models.academic import (
    GrupPilihan,
    Kelas,
    MataPelajaran,
    Ruangan,
    Santri,
    Ustadz,
)
from pesantren_hub.models.finance import (
    Koperasi,
    KoperasiTransaction,
    MonetizationSettings,
    PlatformTransaction,
    Tagihan,
    Transaction,
    WithdrawalRequest,
    WithdrawalStatus,
)
from pesantren_hub.models.content import Ad, ContentCategory, GlobalContent

__all__ = [
    "Base",
    "AccountRole",
    "AccountStatus",
    "AuthIdentity",
    "Profile",
    "Pesantren",
    "PesantrenBankAccount",
    "PesantrenFinancials",
    "GrupPilihan",
    "Kelas",
    "MataPelajaran",
    "Ruangan",
    "Santri",
    "Ustadz",
    "Koperasi",
    "KoperasiTransaction",
    "MonetizationSettings",
    "PlatformTransaction",
    "Tagihan",
    "Transaction",
    "WithdrawalRequest",
    "WithdrawalStatus",
    "Ad",
    "ContentCategory",
    "GlobalContent",
]
