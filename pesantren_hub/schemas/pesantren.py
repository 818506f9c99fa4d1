"""
schemas/pesantren.py
--------------------
Pesantren listings and the two dashboards (platform and pesantren).
"""

from datetime import date, datetime
from typing import List, Optional

from pesantren_hub.schemas.common import CamelModel


class AdminInfo(CamelModel):
    name: str = "Unknown"
    email: str = "Unknown"


class PesantrenRead(CamelModel):
    id: str
    name: str
    address: Optional[str] = None
    contact: Optional[str] = None
    logo_url: str = ""
    document_url: str = ""
    santri_count: int = 0
    ustadz_count: int = 0
    status: str
    subscription_until: Optional[date] = None
    rejection_reason: Optional[str] = None
    admin_id: Optional[str] = None
    created_at: Optional[datetime] = None
    admin: AdminInfo = AdminInfo()


class ActionResult(CamelModel):
    success: bool = True


class PlatformSummary(CamelModel):
    total_pesantren: int
    total_santri: int
    total_transaksi_bulanan: int
    pendapatan_platform: int


class ActivityRead(CamelModel):
    type: str
    description: Optional[str] = None
    timestamp: datetime


class PesantrenSummary(CamelModel):
    jumlah_santri: int
    jumlah_ustadz: int
    total_tagihan_belum_lunas: int
    pendapatan_koperasi_bulanan: int
    aktivitas_terbaru: List[ActivityRead]
