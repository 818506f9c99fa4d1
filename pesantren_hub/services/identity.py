"""
services/identity.py
--------------------
Credential / identity provider used by the facade.

The facade depends only on the IdentityProvider protocol:
  - sign_in_with_password  → AuthSession(access_token, user_id)
  - sign_up                → new identity id
  - delete_identity        → used to compensate a failed onboarding

DatabaseIdentityProvider is the bundled implementation: bcrypt hashes in
auth_identities, JWT access tokens, and a default profile row created on
sign-up (status 'active', no role until the facade assigns one).
"""

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pesantren_hub.core.exceptions import AuthenticationFailed, IdentityError
from pesantren_hub.core.logging import get_logger
from pesantren_hub.core.security import check_password, create_access_token, hash_password
from pesantren_hub.db.session import unit_of_work
from pesantren_hub.models import AuthIdentity, Profile

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user_id: str


class IdentityProvider(Protocol):

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...

    async def sign_up(self, email: str, password: str) -> str:
        ...

    async def delete_identity(self, user_id: str) -> None:
        ...


class DatabaseIdentityProvider:

    def __init__(self, sessions: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = sessions

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """
        Verify credentials and mint an access token.
        Email lookup is case-insensitive. Raises AuthenticationFailed.
        A hash made under an older bcrypt work factor is replaced in place.
        """
        async with unit_of_work(self._sessions) as db:
            identity = (
                await db.execute(
                    select(AuthIdentity).where(AuthIdentity.email == email.lower())
                )
            ).scalar_one_or_none()
            if identity is None:
                raise AuthenticationFailed()
            matched, replacement = check_password(password, identity.hashed_password)
            if not matched:
                raise AuthenticationFailed()
            if replacement is not None:
                identity.hashed_password = replacement
                logger.info("Password hash upgraded", user_id=identity.id)
            profile = await db.get(Profile, identity.id)

        token = create_access_token(
            subject=identity.id,
            tenant_id=profile.tenant_id if profile else None,
            role=profile.role if profile else None,
        )
        return AuthSession(access_token=token, user_id=identity.id)

    async def sign_up(self, email: str, password: str) -> str:
        async with unit_of_work(self._sessions) as db:
            identity = AuthIdentity(
                email=email.lower(),
                hashed_password=hash_password(password),
            )
            db.add(identity)
            try:
                await db.flush()
            except IntegrityError:
                raise IdentityError(f"Email '{email}' sudah terdaftar")
            db.add(Profile(id=identity.id, email=identity.email))
            await db.flush()

        logger.info("Identity created", user_id=identity.id)
        return identity.id

    async def delete_identity(self, user_id: str) -> None:
        async with unit_of_work(self._sessions) as db:
            await db.execute(delete(Profile).where(Profile.id == user_id))
            await db.execute(delete(AuthIdentity).where(AuthIdentity.id == user_id))
        logger.info("Identity deleted", user_id=user_id)
