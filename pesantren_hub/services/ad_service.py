"""
services/ad_service.py
----------------------
Platform ads, optionally targeted at a list of pesantren ids.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.logging import get_logger
from pesantren_hub.models import Ad
from pesantren_hub.schemas.common import DeletedRead, ListParams, Page
from pesantren_hub.schemas.content import AdRead, AdSave
from pesantren_hub.services.query import delete_one, fetch_page, get_one

logger = get_logger(__name__)

AD_NOT_FOUND = "Iklan tidak ditemukan"


class AdService:

    @staticmethod
    async def list_ads(db: AsyncSession, params: ListParams) -> Page[AdRead]:
        pagination, rows = await fetch_page(
            db,
            params,
            model=Ad,
            search_columns=(Ad.title,),
            order_by=Ad.created_at.desc(),
        )
        return Page[AdRead](
            data=[AdRead.model_validate(ad) for (ad,) in rows],
            pagination=pagination,
        )

    @staticmethod
    async def add(db: AsyncSession, data: AdSave) -> AdRead:
        ad = Ad(**data.model_dump())
        db.add(ad)
        await db.flush()
        await db.refresh(ad)
        logger.info("Ad created", ad_id=ad.id)
        return AdRead.model_validate(ad)

    @staticmethod
    async def update(db: AsyncSession, ad_id: str, data: AdSave) -> AdRead:
        ad = await get_one(db, Ad, ad_id, message=AD_NOT_FOUND)
        for field, value in data.model_dump().items():
            setattr(ad, field, value)
        await db.flush()
        await db.refresh(ad)
        return AdRead.model_validate(ad)

    @staticmethod
    async def delete(db: AsyncSession, ad_id: str) -> DeletedRead:
        await delete_one(db, Ad, ad_id, message=AD_NOT_FOUND)
        logger.info("Ad deleted", ad_id=ad_id)
        return DeletedRead(id=ad_id)
