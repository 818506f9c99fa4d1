"""
services/santri_service.py
--------------------------
Santri (student) reads and writes for one pesantren.

Critical security invariant:
  Every query includes pesantren_id in the WHERE clause, including the
  class lookup, so a santri can never be attached to another tenant's class.
"""

from typing import Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.exceptions import ValidationFailed
from pesantren_hub.core.logging import get_logger
from pesantren_hub.models import Kelas, Santri
from pesantren_hub.schemas.academic import SantriCreate, SantriRead, SantriUpdate
from pesantren_hub.schemas.common import DeletedRead, ListParams, Page
from pesantren_hub.services.normalize import santri_read
from pesantren_hub.services.query import delete_one, fetch_page, get_one, require_tenant

logger = get_logger(__name__)

SANTRI_NOT_FOUND = "Santri tidak ditemukan"


class SantriService:

    @staticmethod
    async def list_for_pesantren(
        db: AsyncSession, tenant_id: str, params: ListParams
    ) -> Page[SantriRead]:
        pagination, rows = await fetch_page(
            db,
            params,
            model=Santri,
            columns=(Kelas.name,),
            joins=(
                (Kelas, and_(Kelas.id == Santri.class_id, Kelas.pesantren_id == Santri.pesantren_id)),
            ),
            tenant_column=Santri.pesantren_id,
            tenant_id=tenant_id,
            search_columns=(Santri.name, Santri.nis),
            status_column=Santri.status,
            order_by=Santri.created_at.desc(),
        )
        return Page[SantriRead](
            data=[santri_read(santri, class_name) for santri, class_name in rows],
            pagination=pagination,
        )

    @staticmethod
    async def add(db: AsyncSession, tenant_id: str, data: SantriCreate) -> SantriRead:
        tenant_id = require_tenant(tenant_id)
        class_name = await SantriService._class_name(db, tenant_id, data.class_id)

        santri = Santri(
            pesantren_id=tenant_id,
            nis=data.nis,
            name=data.name,
            class_id=data.class_id,
            balance=0,
            status="active",
            transaction_pin=None,
            photo_url=data.photo_url,
        )
        db.add(santri)
        await db.flush()
        await db.refresh(santri)

        logger.info("Santri added", santri_id=santri.id, tenant_id=tenant_id)
        return santri_read(santri, class_name)

    @staticmethod
    async def update(
        db: AsyncSession, tenant_id: str, santri_id: str, data: SantriUpdate
    ) -> SantriRead:
        santri = await get_one(
            db,
            Santri,
            santri_id,
            tenant_column=Santri.pesantren_id,
            tenant_id=tenant_id,
            message=SANTRI_NOT_FOUND,
        )
        changes = data.model_dump(exclude_unset=True)
        if "class_id" in changes:
            await SantriService._class_name(db, tenant_id, changes["class_id"])
        for field, value in changes.items():
            setattr(santri, field, value)

        await db.flush()
        await db.refresh(santri)
        class_name = await SantriService._class_name(db, tenant_id, santri.class_id)
        return santri_read(santri, class_name)

    @staticmethod
    async def delete(db: AsyncSession, tenant_id: str, santri_id: str) -> DeletedRead:
        await delete_one(
            db,
            Santri,
            santri_id,
            tenant_column=Santri.pesantren_id,
            tenant_id=tenant_id,
            message=SANTRI_NOT_FOUND,
        )
        logger.info("Santri deleted", santri_id=santri_id, tenant_id=tenant_id)
        return DeletedRead(id=santri_id)

    @staticmethod
    async def _class_name(
        db: AsyncSession, tenant_id: str, class_id: Optional[str]
    ) -> Optional[str]:
        """Name of the tenant's class, or None when no class is given."""
        if not class_id:
            return None
        name = await db.scalar(
            select(Kelas.name).where(Kelas.id == class_id, Kelas.pesantren_id == tenant_id)
        )
        if name is None:
            raise ValidationFailed("Kelas tidak ditemukan")
        return name
