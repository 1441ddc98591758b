"""Streak and shadowing progress endpoints."""
from __future__ import annotations

import uuid
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.db.models.user import User
from lwl.schemas.activity import (
    ShadowingExerciseCreate,
    ShadowingExerciseRead,
    ShadowingProgressRead,
    ShadowingProgressUpdate,
    StreakRead,
)
from lwl.services.shadowing import ShadowingNotFoundError, ShadowingService
from lwl.services.streaks import calculate_streak

router = APIRouter(tags=["progress"])


@router.get("/streaks/{language}", response_model=StreakRead)
def read_streak(
    language: str,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> StreakRead:
    return StreakRead(**asdict(calculate_streak(db, current_user.id, language)))


@router.get("/shadowing", response_model=list[ShadowingExerciseRead])
def list_shadowing(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    return ShadowingService(db).list_exercises(current_user.id)


@router.post("/shadowing", response_model=ShadowingExerciseRead, status_code=status.HTTP_201_CREATED)
def create_shadowing(
    payload: ShadowingExerciseCreate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    return ShadowingService(db).create(current_user.id, payload)


@router.put("/shadowing/{exercise_id}/progress", response_model=ShadowingProgressRead)
def update_shadowing_progress(
    exercise_id: uuid.UUID,
    payload: ShadowingProgressUpdate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    try:
        return ShadowingService(db).update_progress(
            current_user.id, exercise_id, payload.sentence_index, payload.total_sentences
        )
    except ShadowingNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
