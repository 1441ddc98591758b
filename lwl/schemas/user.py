"""Pydantic models for user API interactions."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


class UserBase(BaseModel):
    email: EmailStr
    full_name: Optional[str] = Field(default=None, max_length=255)
    native_language: str = Field(default="english", max_length=20)
    target_language: Optional[str] = Field(default=None, max_length=20)


class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserRead(UserBase):
    id: uuid.UUID
    is_active: bool
    roles: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("roles", mode="before")
    @classmethod
    def flatten_roles(cls, value):
        return [getattr(item, "role", item) for item in value or []]


class UserUpdate(BaseModel):
    """Partial update of the current user profile."""

    full_name: Optional[str] = Field(default=None, max_length=255)
    native_language: Optional[str] = Field(default=None, max_length=20)
    target_language: Optional[str] = Field(default=None, max_length=20)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def ensure_payload_not_empty(self) -> "UserUpdate":
        if not any(value is not None for value in self.model_dump().values()):
            raise ValueError("At least one field must be provided")
        return self


class RoleUpdate(BaseModel):
    role: str = Field(pattern="^(admin|user)$")


class AdminCheckResponse(BaseModel):
    is_admin: bool
