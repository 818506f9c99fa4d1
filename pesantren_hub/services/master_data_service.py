"""
services/master_data_service.py
-------------------------------
Per-pesantren reference lists (kelas, mapel, ruangan, grupPilihan) that all
share the same shape: a tenant-scoped list of names.

The list kinds form a closed set. Callers parse the raw type string with
MasterDataType.parse before opening a session, so an unknown kind never
reaches the store. grupPilihan is read-only here.
"""

from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.exceptions import ValidationFailed
from pesantren_hub.core.logging import get_logger
from pesantren_hub.models import GrupPilihan, Kelas, MataPelajaran, Ruangan
from pesantren_hub.schemas.academic import MasterDataItemRead, MasterDataItemSave
from pesantren_hub.schemas.common import DeletedRead
from pesantren_hub.services.query import delete_one, get_one, require_tenant

logger = get_logger(__name__)

INVALID_TYPE_MESSAGE = "Invalid master data type"


class MasterDataType(str, Enum):
    kelas = "kelas"
    mapel = "mapel"
    ruangan = "ruangan"
    grup_pilihan = "grupPilihan"

    @property
    def model(self):
        return _MODELS[self]

    @property
    def writable(self) -> bool:
        return self is not MasterDataType.grup_pilihan

    @classmethod
    def parse(cls, value, *, for_write: bool = False) -> "MasterDataType":
        try:
            kind = cls(value)
        except ValueError:
            raise ValidationFailed(INVALID_TYPE_MESSAGE) from None
        if for_write and not kind.writable:
            raise ValidationFailed(INVALID_TYPE_MESSAGE)
        return kind


_MODELS = {
    MasterDataType.kelas: Kelas,
    MasterDataType.mapel: MataPelajaran,
    MasterDataType.ruangan: Ruangan,
    MasterDataType.grup_pilihan: GrupPilihan,
}


class MasterDataService:

    @staticmethod
    async def list_items(
        db: AsyncSession, tenant_id: str, kind: MasterDataType
    ) -> list[MasterDataItemRead]:
        model = kind.model
        result = await db.execute(
            select(model)
            .where(model.pesantren_id == require_tenant(tenant_id))
            .order_by(model.created_at.asc(), model.id)
        )
        return [MasterDataItemRead.model_validate(item) for item in result.scalars().all()]

    @staticmethod
    async def save_item(
        db: AsyncSession,
        tenant_id: str,
        kind: MasterDataType,
        data: MasterDataItemSave,
    ) -> MasterDataItemRead:
        """Rename when data.id is set, otherwise insert a new item."""
        model = kind.model
        tenant_id = require_tenant(tenant_id)

        if data.id:
            item = await get_one(
                db,
                model,
                data.id,
                tenant_column=model.pesantren_id,
                tenant_id=tenant_id,
            )
            item.name = data.name
        else:
            item = model(pesantren_id=tenant_id, name=data.name)
            db.add(item)

        await db.flush()
        await db.refresh(item)
        logger.info("Master data saved", kind=kind.value, item_id=item.id, tenant_id=tenant_id)
        return MasterDataItemRead.model_validate(item)

    @staticmethod
    async def delete_item(
        db: AsyncSession, tenant_id: str, kind: MasterDataType, item_id: str
    ) -> DeletedRead:
        model = kind.model
        await delete_one(
            db,
            model,
            item_id,
            tenant_column=model.pesantren_id,
            tenant_id=tenant_id,
        )
        logger.info("Master data deleted", kind=kind.value, item_id=item_id, tenant_id=tenant_id)
        return DeletedRead(id=item_id)
