from datetime import timedelta

import pytest
from jose import JWTError
from passlib.context import CryptContext

from pesantren_hub.core import security
from pesantren_hub.models import AccountRole, AuthIdentity

from .conftest import DEFAULT_TEST_PASSWORD


def test_token_claims_round_trip():
    token = security.create_access_token("user-1", "tenant-1", "ustadz")
    claims = security.read_access_token(token)
    assert claims.user_id == "user-1"
    assert claims.tenant_id == "tenant-1"
    assert claims.role == "ustadz"


def test_platform_token_has_no_tenant():
    claims = security.read_access_token(
        security.create_access_token("root", None, AccountRole.platform_admin.value)
    )
    assert claims.tenant_id is None


def test_expired_token_is_rejected():
    token = security.create_access_token("user-1", None, None, expires_delta=timedelta(seconds=-5))
    with pytest.raises(JWTError):
        security.read_access_token(token)


def test_token_without_subject_is_rejected():
    token = security.create_access_token("", None, None)
    with pytest.raises(JWTError, match="subject"):
        security.read_access_token(token)


def test_check_password():
    hashed = security.hash_password("bismillah")
    assert security.check_password("bismillah", hashed) == (True, None)
    assert security.check_password("salah", hashed) == (False, None)


def _stricter_context():
    return CryptContext(
        schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=5, bcrypt__min_rounds=5
    )


def test_weak_hash_gets_a_replacement(monkeypatch):
    hashed = security.hash_password("bismillah")
    monkeypatch.setattr(security, "pwd_context", _stricter_context())

    matched, replacement = security.check_password("bismillah", hashed)
    assert matched is True
    assert replacement is not None
    assert replacement.startswith("$2b$05$")


async def test_sign_in_upgrades_stored_hash(monkeypatch, seed, identity):
    user_id = await seed.account("hamid@alfalah.sch.id", role=AccountRole.ustadz)
    monkeypatch.setattr(security, "pwd_context", _stricter_context())

    await identity.sign_in_with_password("hamid@alfalah.sch.id", DEFAULT_TEST_PASSWORD)

    stored = await seed.get(AuthIdentity, user_id)
    assert stored.hashed_password.startswith("$2b$05$")
