"""
services/pesantren_service.py
-----------------------------
Platform-side management of pesantren (tenants): listing and the
approve / reject decisions.

A decision touches two rows in one transaction: the pesantren itself and,
when it has one, its admin's profile, whose status follows the pesantren.
"""

from datetime import date
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.config import settings
from pesantren_hub.core.exceptions import NotFound
from pesantren_hub.core.logging import get_logger
from pesantren_hub.models import AccountStatus, Pesantren, Profile
from pesantren_hub.schemas.common import ListParams, Page
from pesantren_hub.schemas.pesantren import ActionResult, PesantrenRead
from pesantren_hub.services.normalize import pesantren_read
from pesantren_hub.services.query import fetch_page
from pesantren_hub.services.summary import add_years

logger = get_logger(__name__)


class PesantrenService:

    @staticmethod
    async def list_pesantren(db: AsyncSession, params: ListParams) -> Page[PesantrenRead]:
        pagination, rows = await fetch_page(
            db,
            params,
            model=Pesantren,
            columns=(Profile.name, Profile.email),
            joins=((Profile, Profile.id == Pesantren.admin_id),),
            search_columns=(Pesantren.name, Pesantren.id),
            status_column=Pesantren.status,
            order_by=Pesantren.created_at.desc(),
        )
        return Page[PesantrenRead](
            data=[pesantren_read(p, admin_name, admin_email) for p, admin_name, admin_email in rows],
            pagination=pagination,
        )

    @staticmethod
    async def approve(db: AsyncSession, pesantren_id: str) -> ActionResult:
        subscription_until = add_years(date.today(), settings.SUBSCRIPTION_YEARS)
        await PesantrenService._decide(
            db,
            pesantren_id,
            AccountStatus.active,
            subscription_until=subscription_until,
        )
        logger.info(
            "Pesantren approved",
            tenant_id=pesantren_id,
            subscription_until=subscription_until.isoformat(),
        )
        return ActionResult()

    @staticmethod
    async def reject(db: AsyncSession, pesantren_id: str, reason: Optional[str]) -> ActionResult:
        await PesantrenService._decide(
            db,
            pesantren_id,
            AccountStatus.rejected,
            rejection_reason=reason,
        )
        logger.info("Pesantren rejected", tenant_id=pesantren_id)
        return ActionResult()

    @staticmethod
    async def _decide(
        db: AsyncSession,
        pesantren_id: str,
        status: AccountStatus,
        **values,
    ) -> None:
        result = await db.execute(
            update(Pesantren)
            .where(Pesantren.id == pesantren_id)
            .values(status=status.value, **values)
        )
        if result.rowcount == 0:
            raise NotFound("Pesantren tidak ditemukan")

        admin_id = await db.scalar(
            select(Pesantren.admin_id).where(Pesantren.id == pesantren_id)
        )
        if admin_id:
            await db.execute(
                update(Profile).where(Profile.id == admin_id).values(status=status.value)
            )
