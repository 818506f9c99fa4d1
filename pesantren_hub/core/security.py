"""
core/security.py
----------------
Password hashing and JWT token utilities used by the identity provider.

Hashes are bcrypt with BCRYPT_ROUNDS work factor. When that setting is
raised, hashes minted under the old factor are upgraded at the next
successful sign-in (see check_password).

Access tokens carry sub (identity id), tenant_id and role. tenant_id and
role are None for identities without a pesantren or an assigned role.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from pesantren_hub.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
    bcrypt__min_rounds=settings.BCRYPT_ROUNDS,
)


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    tenant_id: Optional[str]
    role: Optional[str]
    expires_at: datetime


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def check_password(plain: str, hashed: str) -> Tuple[bool, Optional[str]]:
    """
    Verify plain against hashed.

    Returns (matched, replacement). replacement is a fresh hash when the
    stored one was made with outdated settings, otherwise None.
    """
    return pwd_context.verify_and_update(plain, hashed)


def create_access_token(
    subject: str,
    tenant_id: Optional[str],
    role: Optional[str],
    expires_delta: Optional[timedelta] = None,
) -> str:
    issued_at = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": subject,
        "tenant_id": tenant_id,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + (expires_delta or settings.access_token_lifetime),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Raw payload of a valid token. Raises JWTError otherwise."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def read_access_token(token: str) -> TokenClaims:
    """
    Decode a token into TokenClaims.

    Raises:
        JWTError: bad signature, expired, or no subject claim.
    """
    payload = decode_access_token(token)
    subject = payload.get("sub")
    if not subject:
        raise JWTError("Token has no subject")
    return TokenClaims(
        user_id=subject,
        tenant_id=payload.get("tenant_id"),
        role=payload.get("role"),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
