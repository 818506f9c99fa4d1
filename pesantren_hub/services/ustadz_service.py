"""
services/ustadz_service.py
--------------------------
Ustadz (teacher) management for one pesantren.

Onboarding is an orchestrated write:
  1. create the ustadz identity (identity provider, compensated on failure)
  2. insert the ustadz row referencing that identity and the pesantren
  3. give the profile the 'ustadz' role inside the pesantren
Steps 2-3 share one store transaction.
"""

from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pesantren_hub.core.config import settings
from pesantren_hub.core.exceptions import NotFound
from pesantren_hub.core.logging import get_logger
from pesantren_hub.db.session import unit_of_work
from pesantren_hub.models import AccountRole, Profile, Ustadz
from pesantren_hub.schemas.academic import UstadzCreate, UstadzRead, UstadzUpdate
from pesantren_hub.schemas.common import DeletedRead, ListParams, Page
from pesantren_hub.services.compensation import CompensationStack
from pesantren_hub.services.identity import IdentityProvider
from pesantren_hub.services.query import delete_one, fetch_page, get_one, require_tenant

logger = get_logger(__name__)

USTADZ_NOT_FOUND = "Ustadz tidak ditemukan"


class UstadzService:

    @staticmethod
    async def list_for_pesantren(
        db: AsyncSession, tenant_id: str, params: ListParams
    ) -> Page[UstadzRead]:
        pagination, rows = await fetch_page(
            db,
            params,
            model=Ustadz,
            tenant_column=Ustadz.pesantren_id,
            tenant_id=tenant_id,
            search_columns=(Ustadz.name, Ustadz.email),
            order_by=Ustadz.created_at.desc(),
        )
        return Page[UstadzRead](
            data=[UstadzRead.model_validate(ustadz) for (ustadz,) in rows],
            pagination=pagination,
        )

    @staticmethod
    async def add(
        sessions: async_sessionmaker[AsyncSession],
        identity: IdentityProvider,
        tenant_id: str,
        data: UstadzCreate,
    ) -> UstadzRead:
        tenant_id = require_tenant(tenant_id)

        async with CompensationStack("add_ustadz") as undo:
            user_id = await identity.sign_up(
                data.email,
                data.password or settings.DEFAULT_MEMBER_PASSWORD,
            )
            undo.push("delete ustadz identity", partial(identity.delete_identity, user_id))

            async with unit_of_work(sessions) as db:
                ustadz = Ustadz(
                    pesantren_id=tenant_id,
                    profile_id=user_id,
                    name=data.name,
                    email=data.email,
                    subject=data.subject,
                    photo_url=data.photo_url,
                )
                db.add(ustadz)
                await db.flush()

                profile = await db.get(Profile, user_id)
                if profile is None:
                    raise NotFound("Profil pengguna tidak ditemukan")
                profile.name = data.name
                profile.role = AccountRole.ustadz.value
                profile.tenant_id = tenant_id

                await db.flush()
                await db.refresh(ustadz)

        logger.info("Ustadz added", ustadz_id=ustadz.id, tenant_id=tenant_id)
        return UstadzRead.model_validate(ustadz)

    @staticmethod
    async def update(
        db: AsyncSession, tenant_id: str, ustadz_id: str, data: UstadzUpdate
    ) -> UstadzRead:
        ustadz = await get_one(
            db,
            Ustadz,
            ustadz_id,
            tenant_column=Ustadz.pesantren_id,
            tenant_id=tenant_id,
            message=USTADZ_NOT_FOUND,
        )
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(ustadz, field, value)
        await db.flush()
        await db.refresh(ustadz)
        return UstadzRead.model_validate(ustadz)

    @staticmethod
    async def delete(db: AsyncSession, tenant_id: str, ustadz_id: str) -> DeletedRead:
        await delete_one(
            db,
            Ustadz,
            ustadz_id,
            tenant_column=Ustadz.pesantren_id,
            tenant_id=tenant_id,
            message=USTADZ_NOT_FOUND,
        )
        logger.info("Ustadz deleted", ustadz_id=ustadz_id, tenant_id=tenant_id)
        return DeletedRead(id=ustadz_id)
