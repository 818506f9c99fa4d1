"""
services/tagihan_service.py
---------------------------
Billing items (tagihan) of one pesantren.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.exceptions import ValidationFailed
from pesantren_hub.core.logging import get_logger
from pesantren_hub.models import Tagihan
from pesantren_hub.schemas.common import DeletedRead, ListParams, Page
from pesantren_hub.schemas.finance import TagihanCreate, TagihanRead, TagihanUpdate
from pesantren_hub.services.normalize import tagihan_read
from pesantren_hub.services.query import delete_one, fetch_page, get_one, require_tenant

logger = get_logger(__name__)

TAGIHAN_NOT_FOUND = "Tagihan tidak ditemukan"


class TagihanService:

    @staticmethod
    async def list_for_pesantren(
        db: AsyncSession, tenant_id: str, params: ListParams
    ) -> Page[TagihanRead]:
        pagination, rows = await fetch_page(
            db,
            params,
            model=Tagihan,
            tenant_column=Tagihan.pesantren_id,
            tenant_id=tenant_id,
            search_columns=(Tagihan.title,),
            order_by=Tagihan.created_at.desc(),
        )
        return Page[TagihanRead](
            data=[tagihan_read(tagihan) for (tagihan,) in rows],
            pagination=pagination,
        )

    @staticmethod
    async def add(db: AsyncSession, tenant_id: str, data: TagihanCreate) -> TagihanRead:
        tagihan = Tagihan(
            pesantren_id=require_tenant(tenant_id),
            title=data.title,
            amount=data.amount,
            total_targets=data.total_targets,
            paid_count=0,
            due_date=data.due_date,
        )
        db.add(tagihan)
        await db.flush()
        await db.refresh(tagihan)
        logger.info("Tagihan added", tagihan_id=tagihan.id, tenant_id=tenant_id)
        return tagihan_read(tagihan)

    @staticmethod
    async def update(
        db: AsyncSession, tenant_id: str, tagihan_id: str, data: TagihanUpdate
    ) -> TagihanRead:
        tagihan = await get_one(
            db,
            Tagihan,
            tagihan_id,
            tenant_column=Tagihan.pesantren_id,
            tenant_id=tenant_id,
            message=TAGIHAN_NOT_FOUND,
        )
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(tagihan, field, value)
        if tagihan.paid_count > tagihan.total_targets:
            raise ValidationFailed("Jumlah lunas melebihi jumlah target tagihan")

        await db.flush()
        await db.refresh(tagihan)
        return tagihan_read(tagihan)

    @staticmethod
    async def delete(db: AsyncSession, tenant_id: str, tagihan_id: str) -> DeletedRead:
        await delete_one(
            db,
            Tagihan,
            tagihan_id,
            tenant_column=Tagihan.pesantren_id,
            tenant_id=tenant_id,
            message=TAGIHAN_NOT_FOUND,
        )
        return DeletedRead(id=tagihan_id)
