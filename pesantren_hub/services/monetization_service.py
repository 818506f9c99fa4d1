"""
services/monetization_service.py
--------------------------------
The platform's fee configuration, stored as a single row.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.exceptions import NotFound
from pesantren_hub.core.logging import get_logger
from pesantren_hub.models import MonetizationSettings
from pesantren_hub.schemas.finance import MonetizationSettingsRead, MonetizationSettingsSave

logger = get_logger(__name__)


class MonetizationService:

    @staticmethod
    async def _current(db: AsyncSession) -> MonetizationSettings | None:
        result = await db.execute(
            select(MonetizationSettings).order_by(MonetizationSettings.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get(db: AsyncSession) -> MonetizationSettingsRead:
        current = await MonetizationService._current(db)
        if current is None:
            raise NotFound("Pengaturan monetisasi belum tersedia")
        return MonetizationSettingsRead.model_validate(current)

    @staticmethod
    async def save(db: AsyncSession, data: MonetizationSettingsSave) -> MonetizationSettingsRead:
        """Update the existing row, or create it on first save."""
        current = await MonetizationService._current(db)
        if current is None:
            current = MonetizationSettings()
            db.add(current)

        current.tagihan_fee = data.tagihan_fee
        current.topup_fee = data.topup_fee
        current.koperasi_commission = data.koperasi_commission
        await db.flush()
        await db.refresh(current)

        logger.info(
            "Monetization settings saved",
            tagihan_fee=current.tagihan_fee,
            topup_fee=current.topup_fee,
            koperasi_commission=current.koperasi_commission,
        )
        return MonetizationSettingsRead.model_validate(current)
