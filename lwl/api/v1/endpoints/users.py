"""User profile endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.db.models.user import User
from lwl.schemas import UserRead, UserUpdate
from lwl.services.users import UserService
from lwl.utils.cache import build_cache_key, cache_backend

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(deps.get_current_user)) -> UserRead:
    cache_key = build_cache_key(user_id=str(current_user.id))
    cached = cache_backend.get("user:profile", cache_key)
    if cached is not None:
        return cached

    payload = UserRead.model_validate(current_user).model_dump(mode="json")
    cache_backend.set("user:profile", cache_key, payload, ttl_seconds=300)
    return payload


@router.patch("/me", response_model=UserRead)
def update_current_user(
    payload: UserUpdate,
    current_user: User = Depends(deps.get_current_user),
    db: Session = Depends(deps.get_db),
) -> UserRead:
    updated = UserService(db).update(current_user, payload)
    cache_backend.invalidate("user:profile", key=build_cache_key(user_id=str(updated.id)))
    return UserRead.model_validate(updated).model_dump(mode="json")
