"""
schemas/academic.py
-------------------
Santri, ustadz and master-data payloads.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from pesantren_hub.schemas.common import CamelModel, PartialUpdate

NO_CLASS_PLACEHOLDER = "Tidak ada kelas"


class SantriRead(CamelModel):
    id: str
    nis: str
    name: str
    class_id: Optional[str] = None
    class_name: str = NO_CLASS_PLACEHOLDER
    balance: int = 0
    status: str
    photo_url: str = ""
    created_at: Optional[datetime] = None


class SantriCreate(CamelModel):
    nis: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    class_id: Optional[str] = None
    photo_url: str = ""


class SantriUpdate(PartialUpdate):
    NULLABLE = frozenset({"class_id"})

    nis: Optional[str] = Field(default=None, min_length=1, max_length=64)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    class_id: Optional[str] = None


class MasterDataItemRead(CamelModel):
    id: str
    name: str
    created_at: Optional[datetime] = None


class MasterDataItemSave(CamelModel):
    """Insert when id is absent, otherwise rename the existing item."""

    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)


class UstadzRead(CamelModel):
    id: str
    profile_id: Optional[str] = None
    name: str
    email: str
    subject: Optional[str] = None
    photo_url: str = ""
    created_at: Optional[datetime] = None


class UstadzCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    subject: Optional[str] = None
    photo_url: str = ""


class UstadzUpdate(PartialUpdate):
    NULLABLE = frozenset({"subject"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    subject: Optional[str] = None
    photo_url: Optional[str] = None
