"""Shared API dependencies."""
from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from lwl.config import settings
from lwl.core.security import InvalidTokenError, decode_token
from lwl.db.models.user import User
from lwl.db.session import get_db
from lwl.schemas import TokenPayload
from lwl.services.auth import is_admin
from lwl.services.llm_service import LLMService
from lwl.services.session_tracker import SessionWordTracker, session_word_tracker

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

_llm_service_singleton: LLMService | None = None

__all__ = [
    "get_client_ip",
    "get_current_admin",
    "get_current_user",
    "get_db",
    "get_llm_service",
    "get_optional_llm_service",
    "get_session_tracker",
]


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """Resolve the authenticated user from the Authorization header."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    try:
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenError("Token must be an access token")
        token_data = TokenPayload.model_validate(payload)
    except (InvalidTokenError, ValidationError, ValueError, KeyError) as exc:
        raise credentials_exception from exc

    user = db.get(User, uuid.UUID(str(token_data.sub)))
    if not user or not user.is_active:
        raise credentials_exception
    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not is_admin(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def get_llm_service() -> LLMService:
    """Return a cached LLM service instance or raise if unavailable."""

    global _llm_service_singleton
    if _llm_service_singleton is None:
        try:
            _llm_service_singleton = LLMService()
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="LLM providers are not configured",
            ) from exc
    return _llm_service_singleton


def get_optional_llm_service() -> LLMService | None:
    """Like :func:`get_llm_service` but returns ``None`` when no provider is configured."""

    try:
        return get_llm_service()
    except HTTPException:
        return None


def get_session_tracker() -> SessionWordTracker:
    return session_word_tracker


def get_client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
