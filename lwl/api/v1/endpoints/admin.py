"""Administrative endpoints."""
from __future__ import annotations

import uuid
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.db.models.user import User
from lwl.schemas import AdminCheckResponse, RoleUpdate, UserRead
from lwl.schemas.billing import BannerCreate, BannerRead, PromoUsageList, PromoUsageRead
from lwl.schemas.messaging import CountEntry, FeedbackRead, VisitorReport
from lwl.schemas.utilities import AdminStatsRead, BucketResponse
from lwl.services.admin import AdminStatsService
from lwl.services.auth import is_admin
from lwl.services.feedback import FeedbackNotFoundError, FeedbackService
from lwl.services.promotions import PromotionService
from lwl.services.storage import StorageService
from lwl.services.users import UserNotFoundError, UserService
from lwl.services.visitors import VisitorService
from lwl.utils.cache import cache_backend
from lwl.utils.exceptions import LwlException, to_http_exception

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/is-admin", response_model=AdminCheckResponse)
def check_admin(current_user: User = Depends(deps.get_current_user)) -> AdminCheckResponse:
    return AdminCheckResponse(is_admin=is_admin(current_user))


@router.get("/stats", response_model=AdminStatsRead)
def read_stats(
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
) -> AdminStatsRead:
    return AdminStatsRead(**asdict(AdminStatsService(db).get_stats()))


@router.get("/users", response_model=list[UserRead])
def list_users(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
) -> list[User]:
    return UserService(db).list_users(limit=limit, offset=offset)


@router.put("/users/{user_id}/role", response_model=UserRead)
def set_user_role(
    user_id: uuid.UUID,
    payload: RoleUpdate,
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
) -> User:
    try:
        return UserService(db).set_role(user_id, payload.role)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/feedback", response_model=list[FeedbackRead])
def list_feedback(
    unread_only: bool = False,
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
):
    return FeedbackService(db).list_feedback(unread_only=unread_only)


@router.post("/feedback/{feedback_id}/read", response_model=FeedbackRead)
def mark_feedback_read(
    feedback_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
):
    try:
        return FeedbackService(db).mark_read(feedback_id)
    except FeedbackNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/visitors", response_model=VisitorReport)
def visitor_report(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
) -> VisitorReport:
    service = VisitorService(db)
    return VisitorReport(
        top_pages=[CountEntry(value=page, count=count) for page, count in service.top_pages(limit)],
        top_referrers=[CountEntry(value=ref, count=count) for ref, count in service.top_referrers(limit)],
        unique_visitors=service.unique_visitors(),
    )


@router.get("/banners", response_model=list[BannerRead])
def list_banners(
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
):
    return PromotionService(db).list_banners()


@router.post("/banners", response_model=BannerRead, status_code=status.HTTP_201_CREATED)
def create_banner(
    payload: BannerCreate,
    db: Session = Depends(deps.get_db),
    admin: User = Depends(deps.get_current_admin),
):
    try:
        banner = PromotionService(db).create_banner(admin.id, payload)
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    cache_backend.invalidate("promotions:banner", prefix="")
    return banner


@router.get("/promo-usage", response_model=PromoUsageList)
def promo_usage(
    promo_code: Optional[str] = Query(default=None, max_length=100),
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
) -> PromoUsageList:
    items = PromotionService(db).list_usage(promo_code)
    return PromoUsageList(items=[PromoUsageRead.model_validate(item) for item in items])


@router.post("/storage/buckets/audio", response_model=BucketResponse)
def ensure_audio_bucket(
    db: Session = Depends(deps.get_db),
    _: User = Depends(deps.get_current_admin),
) -> BucketResponse:
    try:
        bucket, created = StorageService(db).ensure_bucket()
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    verb = "created successfully" if created else "already exists"
    return BucketResponse(message=f"Bucket {bucket.name} {verb}", created=created)
