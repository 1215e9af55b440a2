"""FastAPI application that embeds the in-memory user directory."""
from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List

import anyio
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from pydantic import BaseModel, Field, field_validator

from .config import Settings, load_seed_users, load_settings
from .directory import DuplicateUserError, UserDirectory, normalize_email
from .models import PublicUser, to_public
from .passwords import PasswordHasher, check_password
from .security import AdminTokenAuth

logger = logging.getLogger("storefront.api")

_EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be empty")
        return stripped

    @field_validator("password")
    @classmethod
    def _validate_password(cls, value: str) -> str:
        check_password(value)
        return value

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        stripped = value.strip()
        if not _EMAIL_PATTERN.match(stripped):
            raise ValueError("Please enter a valid email address")
        return stripped


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


def user_to_response(user: PublicUser) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=user.is_admin,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


async def seed_directory(directory: UserDirectory, settings: Settings) -> int:
    """Create the users listed in ``settings.seed_file``; return how many were added."""

    if settings.seed_file is None:
        return 0

    created = 0
    for seed in load_seed_users(settings.seed_file):
        try:
            await directory.create(seed.name, seed.email, seed.password)
        except DuplicateUserError as exc:
            logger.warning("Skipping duplicate seed user %s", exc.email)
            continue
        created += 1
    logger.info("Seeded %s user(s) from %s", created, settings.seed_file)
    return created


def create_app(
    *,
    directory: UserDirectory | None = None,
    settings: Settings | None = None,
    admin_auth: AdminTokenAuth | None = None,
) -> FastAPI:
    if settings is None:
        settings = load_settings()

    if directory is None:
        directory = UserDirectory(hasher=PasswordHasher(settings.bcrypt_rounds))

    if admin_auth is None:
        admin_auth = AdminTokenAuth(settings.admin_tokens)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await seed_directory(directory, settings)
        yield

    app = FastAPI(
        title="Storefront Identity",
        description="Fallback in-memory user directory for the storefront backend",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.directory = directory
    app.state.settings = settings

    def get_directory(request: Request) -> UserDirectory:
        return request.app.state.directory

    async def require_admin(request: Request) -> None:
        await admin_auth(request)

    auth_router = APIRouter(prefix="/auth", tags=["auth"])

    @auth_router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
    async def register(
        payload: RegisterRequest,
        users: UserDirectory = Depends(get_directory),
    ) -> UserResponse:
        logger.info("Registration attempt for %s", payload.email)
        try:
            user = await users.create(payload.name, payload.email, payload.password)
        except DuplicateUserError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return user_to_response(user)

    @auth_router.post("/login", response_model=UserResponse)
    async def login(
        payload: LoginRequest,
        users: UserDirectory = Depends(get_directory),
    ) -> UserResponse:
        record = await users.find_by_email(payload.email)
        if record is None:
            verified = await anyio.to_thread.run_sync(users.hasher.dummy_verify)
        else:
            verified = await users.verify_credential(record.id, payload.password)
        if record is None or not verified:
            logger.warning("Failed login attempt for %s", normalize_email(payload.email))
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )

        user = to_public(record)
        logger.info("User %s signed in", user.id)
        return user_to_response(user)

    app.include_router(auth_router)

    admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

    @admin_router.get("/users", response_model=UserListResponse)
    async def list_users(users: UserDirectory = Depends(get_directory)) -> UserListResponse:
        listed = await users.list_all()
        return UserListResponse(users=[user_to_response(user) for user in listed], total=len(listed))

    @admin_router.get("/users/{user_id}", response_model=UserResponse)
    async def get_user(user_id: int, users: UserDirectory = Depends(get_directory)) -> UserResponse:
        user = await users.find_by_id(user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user_to_response(user)

    app.include_router(admin_router)

    @app.get("/health")
    async def health(users: UserDirectory = Depends(get_directory)) -> dict:
        return {"status": "healthy", "users": users.count()}

    return app


__all__ = ["create_app", "seed_directory", "user_to_response"]
