"""Dictation exercise endpoints."""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.db.models.user import User
from lwl.schemas.exercise import ExerciseCreate, ExerciseRead, ReadingCountResponse
from lwl.services.exercises import ExerciseNotFoundError, ExerciseService

router = APIRouter(prefix="/exercises", tags=["exercises"])


def _not_found(exc: ExerciseNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/", response_model=list[ExerciseRead])
def list_exercises(
    language: Optional[str] = Query(default=None, max_length=20),
    include_archived: bool = False,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    return ExerciseService(db).list_exercises(
        current_user.id, language=language, include_archived=include_archived, limit=limit, offset=offset
    )


@router.post("/", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
def create_exercise(
    payload: ExerciseCreate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    return ExerciseService(db).create(current_user.id, payload)


@router.get("/reading-count", response_model=ReadingCountResponse)
def reading_exercise_count(
    language: str = Query(..., min_length=1, max_length=20),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ReadingCountResponse:
    count = ExerciseService(db).reading_exercise_count(current_user.id, language)
    return ReadingCountResponse(language=language, count=count)


@router.get("/{exercise_id}", response_model=ExerciseRead)
def get_exercise(
    exercise_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return ExerciseService(db).get(current_user.id, exercise_id)
    except ExerciseNotFoundError as exc:
        raise _not_found(exc) from exc


@router.delete("/{exercise_id}", response_model=ExerciseRead)
def archive_exercise(
    exercise_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """Archive an exercise; it stays stored but leaves default listings."""

    try:
        return ExerciseService(db).archive(current_user.id, exercise_id)
    except ExerciseNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post("/{exercise_id}/complete", response_model=ExerciseRead)
def complete_exercise(
    exercise_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return ExerciseService(db).record_completion(current_user.id, exercise_id)
    except ExerciseNotFoundError as exc:
        raise _not_found(exc) from exc
