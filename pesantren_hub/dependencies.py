"""
dependencies.py
---------------
FastAPI dependency injection functions for authentication and authorisation.

Flow:
  1. OAuth2PasswordBearer extracts the Bearer token from the Authorization header.
  2. read_access_token validates the JWT and returns its TokenClaims.
  3. get_current_profile reloads the Profile from the DB, so deleted or
     de-activated accounts are rejected even while their token is valid.
  4. get_platform_admin / get_tenant_member layer role checks on top.

Tenant routes take the pesantren id from the caller's persisted profile,
never from the request, so one pesantren cannot address another's data.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.logging import get_logger
from pesantren_hub.core.security import read_access_token
from pesantren_hub.facade import PesantrenHubFacade
from pesantren_hub.models import AccountRole, AccountStatus, Profile

logger = get_logger(__name__)

# tokenUrl must match the login endpoint path
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)

_TENANT_ROLES = (AccountRole.pesantren_admin.value, AccountRole.ustadz.value)


def get_facade(request: Request) -> PesantrenHubFacade:
    return request.app.state.facade


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Read-only session for auth lookups; writes go through the facade."""
    async with request.app.state.sessions() as session:
        yield session


async def get_current_profile(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile:
    """
    Decode the JWT, then load and return the caller's Profile.
    Raises 401 if the token is invalid or the account is no longer active.
    """
    try:
        claims = read_access_token(token)
    except JWTError as exc:
        logger.warning("JWT decode failed", error=str(exc))
        raise _CREDENTIALS_EXCEPTION

    profile = await db.get(Profile, claims.user_id)
    if profile is None or profile.status != AccountStatus.active.value:
        logger.warning("Profile from valid JWT not usable", user_id=claims.user_id)
        raise _CREDENTIALS_EXCEPTION

    return profile


async def get_platform_admin(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    if profile.role != AccountRole.platform_admin.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Platform admin privileges required",
        )
    return profile


async def get_tenant_member(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    if profile.role not in _TENANT_ROLES or not profile.tenant_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Pesantren membership required",
        )
    return profile


async def get_tenant_admin(
    profile: Annotated[Profile, Depends(get_tenant_member)],
) -> Profile:
    if profile.role != AccountRole.pesantren_admin.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Pesantren admin privileges required",
        )
    return profile


FacadeDep = Annotated[PesantrenHubFacade, Depends(get_facade)]
PlatformAdmin = Annotated[Profile, Depends(get_platform_admin)]
TenantMember = Annotated[Profile, Depends(get_tenant_member)]
TenantAdmin = Annotated[Profile, Depends(get_tenant_admin)]
