"""Pydantic schemas package."""

from lwl.schemas.auth import Token, TokenPayload
from lwl.schemas.user import AdminCheckResponse, RoleUpdate, UserCreate, UserLogin, UserRead, UserUpdate

__all__ = [
    "Token",
    "TokenPayload",
    "AdminCheckResponse",
    "RoleUpdate",
    "UserCreate",
    "UserLogin",
    "UserRead",
    "UserUpdate",
]
