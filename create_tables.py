"""
create_tables.py
----------------
One-shot script to create all database tables.
Use this for quick setup. For production migrations, use Alembic instead.

Usage:
    python create_tables.py
    python create_tables.py --platform-admin admin@example.org --password s3cret
"""

import argparse
import asyncio
from typing import Optional

from pesantren_hub.core.config import settings
from pesantren_hub.core.logging import configure_logging, get_logger
from pesantren_hub.db.session import (
    create_engine_from_settings,
    create_session_factory,
    unit_of_work,
)
from pesantren_hub.models import AccountRole, Base, Profile  # Imports all models so metadata is populated
from pesantren_hub.services.identity import DatabaseIdentityProvider

logger = get_logger(__name__)


async def create_all_tables(admin_email: Optional[str] = None, password: Optional[str] = None) -> None:
    engine = create_engine_from_settings(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("All tables created")

    if admin_email:
        # The platform admin has no self-service signup; seed it here.
        sessions = create_session_factory(engine)
        identity = DatabaseIdentityProvider(sessions)
        user_id = await identity.sign_up(admin_email, password or settings.DEFAULT_MEMBER_PASSWORD)
        async with unit_of_work(sessions) as db:
            profile = await db.get(Profile, user_id)
            profile.name = "Platform Admin"
            profile.role = AccountRole.platform_admin.value
        logger.info("Platform admin created", user_id=user_id, email=admin_email)

    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create tables and optionally seed a platform admin.")
    parser.add_argument("--platform-admin", dest="admin_email", default=None)
    parser.add_argument("--password", default=None)
    args = parser.parse_args()

    configure_logging()
    asyncio.run(create_all_tables(args.admin_email, args.password))
