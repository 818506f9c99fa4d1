"""
api/routes/auth.py
------------------
Authentication endpoints.

POST /login               — Exchange credentials for a JWT access token.
                            Accepts OAuth2 form data (Swagger UI).
POST /register-pesantren  — Self-service onboarding of a pesantren + its admin.
GET  /me                  — Return the authenticated user's profile.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm

from pesantren_hub.api.responses import respond
from pesantren_hub.dependencies import FacadeDep, get_current_profile
from pesantren_hub.models import Profile
from pesantren_hub.schemas.account import ProfileRead

router = APIRouter(tags=["Authentication"])


@router.post("/login", summary="Login and receive a JWT access token")
async def login(
    # The "username" field contains the email address.
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    facade: FacadeDep,
) -> JSONResponse:
    """
    Authenticate with email + password.
    Accounts still waiting for platform approval, or rejected, get an error
    envelope even with valid credentials.
    """
    return respond(await facade.login(form_data.username, form_data.password))


@router.post("/register-pesantren", summary="Register a new pesantren")
async def register_pesantren(
    facade: FacadeDep,
    body: dict[str, Any] = Body(...),
) -> JSONResponse:
    return respond(
        await facade.register_pesantren(body),
        success_code=status.HTTP_201_CREATED,
    )


@router.get("/me", response_model=ProfileRead, summary="Get the current profile")
async def get_me(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> ProfileRead:
    return ProfileRead.model_validate(profile)
