"""Authentication service layer."""
from __future__ import annotations

import uuid

from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lwl.config import settings
from lwl.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
)
from lwl.db.models.user import User, UserRole
from lwl.schemas.auth import Token
from lwl.schemas.user import UserCreate

ADMIN_ROLE = "admin"
USER_ROLE = "user"


class EmailAlreadyExistsError(ValueError):
    """Raised when attempting to register with an email that already exists."""


class InvalidCredentialsError(ValueError):
    """Raised when authentication credentials are invalid."""


class AuthService:
    """User registration, login and token issuance."""

    def __init__(self, db: Session):
        self.db = db

    def register_user(self, payload: UserCreate) -> User:
        email = payload.email.lower()
        existing_user = self.db.scalar(select(User).where(User.email == email))
        if existing_user:
            raise EmailAlreadyExistsError("A user with this email already exists.")

        user = User(
            email=email,
            hashed_password=get_password_hash(payload.password),
            full_name=payload.full_name,
            native_language=payload.native_language,
            target_language=payload.target_language,
        )
        user.roles.append(UserRole(role=USER_ROLE))

        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise EmailAlreadyExistsError("A user with this email already exists.") from exc
        self.db.refresh(user)
        logger.info("User registered", user_id=str(user.id))
        return user

    def authenticate_user(self, email: str, password: str) -> User:
        user = self.db.scalar(select(User).where(User.email == email.lower()))
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError("Incorrect email or password")
        return user

    def create_tokens(self, user: User) -> Token:
        user_id = str(uuid.UUID(str(user.id)))
        return Token(
            access_token=create_access_token(user_id),
            refresh_token=create_refresh_token(user_id),
        )


def is_admin(user: User) -> bool:
    """Return whether ``user`` holds the admin role or owns the configured admin email."""

    if user.has_role(ADMIN_ROLE):
        return True
    return bool(settings.ADMIN_EMAIL) and user.email.lower() == settings.ADMIN_EMAIL.lower()


def handle_email_exists(error: EmailAlreadyExistsError) -> None:
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(error),
    ) from error


def handle_invalid_credentials(error: InvalidCredentialsError) -> None:
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=str(error),
        headers={"WWW-Authenticate": "Bearer"},
    ) from error
