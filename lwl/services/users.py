"""Service layer for user operations."""
from __future__ import annotations

import uuid

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from lwl.db.models.user import User, UserRole
from lwl.schemas.user import UserUpdate
from lwl.services.auth import ADMIN_ROLE, USER_ROLE


class UserNotFoundError(ValueError):
    """Raised when a user lookup fails."""


class UserService:
    """Profile reads and updates plus role assignment."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: uuid.UUID) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError("User not found")
        return user

    def update(self, user: User, payload: UserUpdate) -> User:
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_role(self, user_id: uuid.UUID, role: str) -> User:
        """Grant ``role`` to a user; granting ``user`` revokes ``admin``."""

        if role not in (ADMIN_ROLE, USER_ROLE):
            raise ValueError(f"Unknown role: {role}")
        user = self.get(user_id)
        if role == USER_ROLE:
            user.roles = [item for item in user.roles if item.role != ADMIN_ROLE]
        if not user.has_role(role):
            user.roles.append(UserRole(role=role))
        self.db.commit()
        self.db.refresh(user)
        logger.info("User role updated", user_id=str(user_id), role=role)
        return user

    def list_users(self, limit: int = 50, offset: int = 0) -> list[User]:
        stmt = select(User).order_by(User.created_at.desc()).offset(offset).limit(limit)
        return list(self.db.scalars(stmt))
