"""
services/content_service.py
---------------------------
Platform content moderation and its category list.

Content may belong to a pesantren or to the platform itself
(pesantren_id NULL, shown as "Platform").
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.exceptions import NotFound
from pesantren_hub.core.logging import get_logger
from pesantren_hub.models import ContentCategory, GlobalContent, Pesantren
from pesantren_hub.schemas.common import DeletedRead, ListParams, Page
from pesantren_hub.schemas.content import (
    ContentCategoryRead,
    ContentCategorySave,
    GlobalContentRead,
)
from pesantren_hub.services.normalize import content_read
from pesantren_hub.services.query import delete_one, fetch_page, get_one

logger = get_logger(__name__)

CONTENT_NOT_FOUND = "Konten tidak ditemukan"
CATEGORY_NOT_FOUND = "Kategori tidak ditemukan"


class ContentService:

    # ── Categories ───────────────────────────────────────────────────────────

    @staticmethod
    async def list_categories(db: AsyncSession) -> list[ContentCategoryRead]:
        result = await db.execute(
            select(ContentCategory).order_by(ContentCategory.created_at.asc(), ContentCategory.id)
        )
        return [ContentCategoryRead.model_validate(c) for c in result.scalars().all()]

    @staticmethod
    async def save_category(db: AsyncSession, data: ContentCategorySave) -> ContentCategoryRead:
        if data.id:
            category = await get_one(db, ContentCategory, data.id, message=CATEGORY_NOT_FOUND)
            category.name = data.name
        else:
            category = ContentCategory(name=data.name)
            db.add(category)
        await db.flush()
        await db.refresh(category)
        return ContentCategoryRead.model_validate(category)

    @staticmethod
    async def delete_category(db: AsyncSession, category_id: str) -> DeletedRead:
        await delete_one(db, ContentCategory, category_id, message=CATEGORY_NOT_FOUND)
        return DeletedRead(id=category_id)

    # ── Content ──────────────────────────────────────────────────────────────

    @staticmethod
    async def list_content(db: AsyncSession, params: ListParams) -> Page[GlobalContentRead]:
        pagination, rows = await fetch_page(
            db,
            params,
            model=GlobalContent,
            columns=(Pesantren.name,),
            joins=((Pesantren, Pesantren.id == GlobalContent.pesantren_id),),
            search_columns=(GlobalContent.title, GlobalContent.author),
            status_column=GlobalContent.status,
            order_by=GlobalContent.created_at.desc(),
        )
        return Page[GlobalContentRead](
            data=[content_read(content, name) for content, name in rows],
            pagination=pagination,
        )

    @staticmethod
    async def approve(db: AsyncSession, content_id: str) -> GlobalContentRead:
        return await ContentService._change(db, content_id, status="approved")

    @staticmethod
    async def reject(db: AsyncSession, content_id: str, reason: Optional[str]) -> GlobalContentRead:
        return await ContentService._change(
            db, content_id, status="rejected", rejection_reason=reason
        )

    @staticmethod
    async def set_featured(db: AsyncSession, content_id: str, featured: bool) -> GlobalContentRead:
        return await ContentService._change(db, content_id, featured=bool(featured))

    @staticmethod
    async def _change(db: AsyncSession, content_id: str, **changes) -> GlobalContentRead:
        content = await get_one(db, GlobalContent, content_id, message=CONTENT_NOT_FOUND)
        for field, value in changes.items():
            setattr(content, field, value)
        await db.flush()

        row = (
            await db.execute(
                select(GlobalContent, Pesantren.name)
                .outerjoin(Pesantren, Pesantren.id == GlobalContent.pesantren_id)
                .where(GlobalContent.id == content_id)
                .execution_options(populate_existing=True)
            )
        ).one_or_none()
        if row is None:
            raise NotFound(CONTENT_NOT_FOUND)

        logger.info("Content updated", content_id=content_id, changes=sorted(changes))
        return content_read(*row)
