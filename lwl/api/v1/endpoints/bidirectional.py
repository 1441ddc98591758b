"""Bidirectional translation exercise endpoints."""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.db.models.user import User
from lwl.schemas.bidirectional import (
    BidirectionalCreate,
    BidirectionalExerciseRead,
    BidirectionalReviewCreate,
    BidirectionalReviewRead,
    BidirectionalTranslationsUpdate,
    DueReview,
    DueReviewList,
    ExerciseStatus,
    MasteredWordRead,
)
from lwl.services.bidirectional import BidirectionalNotFoundError, BidirectionalService
from lwl.services.llm_service import LLMService

router = APIRouter(prefix="/bidirectional", tags=["bidirectional"])


def _not_found(exc: BidirectionalNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post("/exercises", response_model=BidirectionalExerciseRead, status_code=status.HTTP_201_CREATED)
def create_exercise(
    payload: BidirectionalCreate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    llm_service: Optional[LLMService] = Depends(deps.get_optional_llm_service),
):
    return BidirectionalService(db, llm_service).create(current_user.id, payload)


@router.get("/exercises", response_model=list[BidirectionalExerciseRead])
def list_exercises(
    status_filter: Optional[ExerciseStatus] = Query(default=None, alias="status"),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    return BidirectionalService(db).list_exercises(current_user.id, status=status_filter)


@router.get("/reviews/due", response_model=DueReviewList)
def due_reviews(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> DueReviewList:
    due = BidirectionalService(db).get_due_reviews(current_user.id)
    return DueReviewList(
        items=[
            DueReview(exercise=BidirectionalExerciseRead.model_validate(exercise), review_type=review_type)
            for exercise, review_type in due
        ]
    )


@router.get("/mastered-words", response_model=list[MasteredWordRead])
def mastered_words(
    language: Optional[str] = Query(default=None, max_length=20),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    return BidirectionalService(db).list_mastered_words(current_user.id, language)


@router.get("/exercises/{exercise_id}", response_model=BidirectionalExerciseRead)
def get_exercise(
    exercise_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return BidirectionalService(db).get(current_user.id, exercise_id)
    except BidirectionalNotFoundError as exc:
        raise _not_found(exc) from exc


@router.patch("/exercises/{exercise_id}", response_model=BidirectionalExerciseRead)
def update_translations(
    exercise_id: uuid.UUID,
    payload: BidirectionalTranslationsUpdate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return BidirectionalService(db).update_translations(current_user.id, exercise_id, payload)
    except BidirectionalNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post("/exercises/{exercise_id}/start-review", response_model=BidirectionalExerciseRead)
def start_review(
    exercise_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return BidirectionalService(db).promote_to_reviewing(current_user.id, exercise_id)
    except BidirectionalNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post(
    "/exercises/{exercise_id}/reviews",
    response_model=BidirectionalReviewRead,
    status_code=status.HTTP_201_CREATED,
)
def record_review(
    exercise_id: uuid.UUID,
    payload: BidirectionalReviewCreate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return BidirectionalService(db).record_review(current_user.id, exercise_id, payload)
    except BidirectionalNotFoundError as exc:
        raise _not_found(exc) from exc


@router.delete("/exercises/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exercise(
    exercise_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Response:
    try:
        BidirectionalService(db).delete(current_user.id, exercise_id)
    except BidirectionalNotFoundError as exc:
        raise _not_found(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
