import os

# Settings are read at import time; configure them before importing the app.
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./pesantren_hub_test.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DEBUG"] = "false"

from typing import Optional

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine

from pesantren_hub.db.base import generate_uuid
from pesantren_hub.db.session import create_session_factory, unit_of_work
from pesantren_hub.facade import PesantrenHubFacade
from pesantren_hub.models import (
    AccountRole,
    AccountStatus,
    Base,
    Pesantren,
    PesantrenBankAccount,
    PesantrenFinancials,
    Profile,
)
from pesantren_hub.services.identity import DatabaseIdentityProvider

DEFAULT_TEST_PASSWORD = "rahasia123"


class Seeder:
    """Writes fixture rows straight to the store, bypassing the facade."""

    def __init__(self, sessions, identity):
        self.sessions = sessions
        self.identity = identity

    async def add(self, *rows):
        async with unit_of_work(self.sessions) as db:
            db.add_all(rows)
        return rows

    async def get(self, model, row_id):
        async with self.sessions() as db:
            return await db.get(model, row_id)

    async def count(self, model, *conditions) -> int:
        async with self.sessions() as db:
            return await db.scalar(select(func.count()).select_from(model).where(*conditions))

    async def pesantren(
        self,
        name: str,
        *,
        status: str = "active",
        santri_count: int = 0,
        ustadz_count: int = 0,
        balance: int = 0,
        admin_id: Optional[str] = None,
    ) -> str:
        pesantren_id = generate_uuid()
        await self.add(
            Pesantren(
                id=pesantren_id,
                name=name,
                status=status,
                santri_count=santri_count,
                ustadz_count=ustadz_count,
                admin_id=admin_id,
            ),
            PesantrenFinancials(
                pesantren_id=pesantren_id,
                available_balance=balance,
                pending_balance=0,
                monthly_income=0,
                last_withdrawal=0,
            ),
        )
        return pesantren_id

    async def bank_account(self, pesantren_id: str, bank_name: str = "BSI") -> str:
        account_id = generate_uuid()
        await self.add(
            PesantrenBankAccount(
                id=account_id,
                pesantren_id=pesantren_id,
                bank_name=bank_name,
                account_holder="Yayasan Al-Falah",
                account_number="7001234567",
            )
        )
        return account_id

    async def account(
        self,
        email: str,
        *,
        role: AccountRole,
        status: AccountStatus = AccountStatus.active,
        tenant_id: Optional[str] = None,
        name: str = "Pengguna Uji",
        password: str = DEFAULT_TEST_PASSWORD,
    ) -> str:
        user_id = await self.identity.sign_up(email, password)
        async with unit_of_work(self.sessions) as db:
            profile = await db.get(Profile, user_id)
            profile.name = name
            profile.role = role.value
            profile.status = status.value
            profile.tenant_id = tenant_id
        return user_id


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'hub.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessions(engine):
    return create_session_factory(engine)


@pytest.fixture
def identity(sessions):
    return DatabaseIdentityProvider(sessions)


@pytest.fixture
def facade(sessions, identity):
    return PesantrenHubFacade(sessions, identity)


@pytest.fixture
def seed(sessions, identity):
    return Seeder(sessions, identity)


@pytest.fixture
async def two_tenants(seed):
    """Two active pesantren, each with its own admin account."""
    alfalah = await seed.pesantren("Pondok Al-Falah", santri_count=120, balance=1_000_000)
    annur = await seed.pesantren("Pondok An-Nur", santri_count=80)
    await seed.account(
        "admin@alfalah.sch.id", role=AccountRole.pesantren_admin, tenant_id=alfalah
    )
    await seed.account("admin@annur.sch.id", role=AccountRole.pesantren_admin, tenant_id=annur)
    return alfalah, annur
