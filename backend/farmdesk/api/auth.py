from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from farmdesk.api.deps import get_current_user
from farmdesk.core.logging import api_logger
from farmdesk.core.security import create_access_token, verify_password
from farmdesk.db.database import get_db, get_session_factory
from farmdesk.permissions.constants import AppModule
from farmdesk.permissions.service import visible_modules
from farmdesk.services.onboarding import get_identity, register_identity
from farmdesk.sync.loader import load_current_user
from farmdesk.sync.views import CamelModel, CurrentUser

router = APIRouter()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: CurrentUser


class MeResponse(CamelModel):
    user: CurrentUser
    modules: list[AppModule]


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    email = request.email.lower()
    if await get_identity(db, email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    await register_identity(db, email, request.password)
    await db.commit()
    api_logger.info("Identity registered", email=email)

    user = await load_current_user(session_factory, email)
    return TokenResponse(access_token=create_access_token(data={"sub": email}), user=user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    email = request.email.lower()
    identity = await get_identity(db, email)

    if not identity or not verify_password(request.password, identity.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    if not identity.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    # A missing profile surfaces as ProfileError (401) before a token is issued
    user = await load_current_user(session_factory, email)
    return TokenResponse(access_token=create_access_token(data={"sub": email}), user=user)


@router.post("/logout")
async def logout():
    # JWTs are dropped client-side
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=MeResponse)
async def me(user: CurrentUser = Depends(get_current_user)):
    return MeResponse(user=user, modules=visible_modules(user.permissions))
