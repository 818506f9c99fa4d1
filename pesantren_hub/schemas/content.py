"""
schemas/content.py
------------------
Content categories, global content and ads.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from pesantren_hub.schemas.common import CamelModel


class ContentCategoryRead(CamelModel):
    id: str
    name: str
    created_at: Optional[datetime] = None


class ContentCategorySave(CamelModel):
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=255)


class GlobalContentRead(CamelModel):
    id: str
    title: str
    author: Optional[str] = None
    body: Optional[str] = None
    status: str
    featured: bool = False
    category_id: Optional[str] = None
    pesantren_id: Optional[str] = None
    pesantren_name: str = "Platform"
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None


class AdRead(CamelModel):
    id: str
    title: str
    type: Optional[str] = None
    status: Optional[str] = None
    image_url: Optional[str] = None
    target_url: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    placement: Optional[str] = None
    target_pesantren_ids: List[str] = []
    created_at: Optional[datetime] = None


class AdSave(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: Optional[str] = None
    status: Optional[str] = None
    image_url: Optional[str] = None
    target_url: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    placement: Optional[str] = None
    target_pesantren_ids: List[str] = []
