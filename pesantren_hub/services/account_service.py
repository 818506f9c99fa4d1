"""
services/account_service.py
---------------------------
Login and pesantren self-registration.

Registration is an orchestrated write:
  1. create the admin identity (identity provider, compensated on failure)
  2. insert the pesantren row with status 'pending'
  3. turn the admin's profile into a pending pesantren_admin of that row
  4. insert a zero-valued financials row
Steps 2-4 share one store transaction.
"""

from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pesantren_hub.core.config import settings
from pesantren_hub.core.exceptions import BusinessRuleViolation, NotFound
from pesantren_hub.core.logging import get_logger
from pesantren_hub.db.session import unit_of_work
from pesantren_hub.models import (
    AccountRole,
    AccountStatus,
    Pesantren,
    PesantrenFinancials,
    Profile,
)
from pesantren_hub.schemas.account import (
    LoginResult,
    PesantrenRegistration,
    ProfileRead,
    RegistrationResult,
)
from pesantren_hub.services.compensation import CompensationStack
from pesantren_hub.services.identity import IdentityProvider

logger = get_logger(__name__)

PENDING_ACCOUNT_MESSAGE = "Akun Anda sedang menunggu verifikasi oleh Admin Platform."
REJECTED_ACCOUNT_MESSAGE = "Akun Anda ditolak. Silakan hubungi admin platform."
REGISTRATION_ACCEPTED_MESSAGE = "Pendaftaran berhasil, menunggu verifikasi."


class AccountService:

    @staticmethod
    async def login(
        db: AsyncSession,
        identity: IdentityProvider,
        email: str,
        password: str,
    ) -> LoginResult:
        """
        Valid credentials are not enough: accounts still pending approval or
        rejected by the platform are refused with their own message.
        """
        auth = await identity.sign_in_with_password(email, password)

        profile = await db.get(Profile, auth.user_id)
        if profile is None:
            raise NotFound("Profil pengguna tidak ditemukan")

        if profile.status == AccountStatus.pending.value:
            raise BusinessRuleViolation(PENDING_ACCOUNT_MESSAGE)
        if profile.status == AccountStatus.rejected.value:
            raise BusinessRuleViolation(REJECTED_ACCOUNT_MESSAGE)

        logger.info("User logged in", user_id=profile.id, tenant_id=profile.tenant_id)
        return LoginResult(token=auth.access_token, user=ProfileRead.model_validate(profile))

    @staticmethod
    async def register_pesantren(
        sessions: async_sessionmaker[AsyncSession],
        identity: IdentityProvider,
        data: PesantrenRegistration,
    ) -> RegistrationResult:
        async with CompensationStack("register_pesantren") as undo:
            user_id = await identity.sign_up(
                data.admin_email,
                data.password or settings.DEFAULT_MEMBER_PASSWORD,
            )
            undo.push("delete admin identity", partial(identity.delete_identity, user_id))

            async with unit_of_work(sessions) as db:
                pesantren = Pesantren(
                    name=data.pesantren_name,
                    address=data.address,
                    contact=data.phone,
                    logo_url=data.logo,
                    document_url="",
                    santri_count=data.santri_count,
                    ustadz_count=data.ustadz_count,
                    status=AccountStatus.pending.value,
                    admin_id=user_id,
                )
                db.add(pesantren)
                await db.flush()

                profile = await db.get(Profile, user_id)
                if profile is None:
                    raise NotFound("Profil pengguna tidak ditemukan")
                profile.name = data.admin_name
                profile.role = AccountRole.pesantren_admin.value
                profile.tenant_id = pesantren.id
                profile.pesantren_name = data.pesantren_name
                profile.status = AccountStatus.pending.value

                db.add(
                    PesantrenFinancials(
                        pesantren_id=pesantren.id,
                        available_balance=0,
                        pending_balance=0,
                        monthly_income=0,
                        last_withdrawal=0,
                    )
                )
                await db.flush()

        logger.info("Pesantren registered", tenant_id=pesantren.id, admin_id=user_id)
        return RegistrationResult(message=REGISTRATION_ACCEPTED_MESSAGE)
