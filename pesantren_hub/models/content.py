"""
models/content.py
-----------------
Platform-level content, categories and ads.
pesantren_id is nullable here: NULL means the platform itself owns the row.
"""

from datetime import date
from typing import Optional

from sqlalchemy import JSON, Boolean, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pesantren_hub.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ContentCategory(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "content_categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)


class GlobalContent(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "global_content"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[Optional[str]] = mapped_column(String(255))
    body: Mapped[Optional[str]] = mapped_column(Text)
    category_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("content_categories.id", ondelete="SET NULL")
    )
    pesantren_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("pesantren.id", ondelete="CASCADE"), index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text)


class Ad(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "ads"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[Optional[str]] = mapped_column(String(32))
    status: Mapped[Optional[str]] = mapped_column(String(20))
    image_url: Mapped[Optional[str]] = mapped_column(String(1024))
    target_url: Mapped[Optional[str]] = mapped_column(String(1024))
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    placement: Mapped[Optional[str]] = mapped_column(String(64))
    target_pesantren_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
