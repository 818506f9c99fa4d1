"""
schemas/account.py
------------------
Pydantic models for login, profiles and pesantren registration.

Security note:
  - hashed_password is NEVER included in any response schema.
"""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from pesantren_hub.schemas.common import CamelModel


class ProfileRead(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    role: Optional[str] = None
    status: str
    tenant_id: Optional[str] = None
    pesantren_name: Optional[str] = None


class LoginResult(CamelModel):
    token: str
    user: ProfileRead


class PesantrenRegistration(CamelModel):
    """Self-service onboarding form for a new pesantren and its admin."""

    pesantren_name: str = Field(..., min_length=2, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = None
    logo: str = ""
    santri_count: int = Field(default=0, ge=0)
    ustadz_count: int = Field(default=0, ge=0)
    admin_name: str = Field(..., min_length=1, max_length=255)
    admin_email: EmailStr
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)

    @field_validator("pesantren_name", "admin_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class RegistrationResult(CamelModel):
    success: bool = True
    message: str
