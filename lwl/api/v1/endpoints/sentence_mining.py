"""Sentence mining (cloze practice) endpoints."""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.db.models.user import User
from lwl.schemas.sentence_mining import (
    MiningAnswerRequest,
    MiningAnswerResponse,
    MiningExerciseCreate,
    MiningExerciseRead,
    MiningSessionRead,
    MiningSessionSummary,
    SessionStartRequest,
)
from lwl.services.sentence_mining import (
    MiningSessionClosedError,
    MiningSessionNotFoundError,
    SentenceMiningService,
)
from lwl.services.llm_service import LLMService
from lwl.services.sentence_generator import SentenceGenerator
from lwl.services.session_tracker import SessionWordTracker
from lwl.utils.exceptions import LwlException, to_http_exception

router = APIRouter(prefix="/sentence-mining", tags=["sentence-mining"])


def _service(db: Session, tracker: SessionWordTracker) -> SentenceMiningService:
    return SentenceMiningService(db, tracker=tracker)


def _translate(exc: ValueError) -> HTTPException:
    if isinstance(exc, MiningSessionClosedError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post("/sessions", response_model=MiningSessionRead, status_code=status.HTTP_201_CREATED)
def start_session(
    payload: SessionStartRequest,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    tracker: SessionWordTracker = Depends(deps.get_session_tracker),
):
    return _service(db, tracker).start_session(current_user.id, payload)


@router.get("/sessions/{session_id}", response_model=MiningSessionSummary)
def get_session(
    session_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    tracker: SessionWordTracker = Depends(deps.get_session_tracker),
):
    try:
        return _service(db, tracker).get_session(current_user.id, session_id)
    except MiningSessionNotFoundError as exc:
        raise _translate(exc) from exc


@router.get("/sessions/{session_id}/avoid", response_model=list[str])
def words_to_avoid(
    session_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    tracker: SessionWordTracker = Depends(deps.get_session_tracker),
) -> list[str]:
    """Words the sentence generator should not target next."""

    try:
        return _service(db, tracker).avoidance_list(current_user.id, session_id)
    except MiningSessionNotFoundError as exc:
        raise _translate(exc) from exc


@router.post(
    "/sessions/{session_id}/exercises",
    response_model=MiningExerciseRead,
    status_code=status.HTTP_201_CREATED,
)
def add_exercise(
    session_id: uuid.UUID,
    payload: MiningExerciseCreate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    tracker: SessionWordTracker = Depends(deps.get_session_tracker),
):
    try:
        return _service(db, tracker).add_exercise(current_user.id, session_id, payload)
    except (MiningSessionNotFoundError, MiningSessionClosedError) as exc:
        raise _translate(exc) from exc


@router.post(
    "/sessions/{session_id}/generate",
    response_model=MiningExerciseRead,
    status_code=status.HTTP_201_CREATED,
)
def generate_exercise(
    session_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    tracker: SessionWordTracker = Depends(deps.get_session_tracker),
    llm_service: LLMService = Depends(deps.get_llm_service),
):
    """Generate a cloze exercise whose target avoids recently practised words."""

    try:
        return _service(db, tracker).generate_exercise(current_user.id, session_id, SentenceGenerator(llm_service))
    except (MiningSessionNotFoundError, MiningSessionClosedError) as exc:
        raise _translate(exc) from exc
    except LwlException as exc:
        raise to_http_exception(exc) from exc


@router.post("/exercises/{exercise_id}/answer", response_model=MiningAnswerResponse)
def submit_answer(
    exercise_id: uuid.UUID,
    payload: MiningAnswerRequest,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    tracker: SessionWordTracker = Depends(deps.get_session_tracker),
) -> MiningAnswerResponse:
    try:
        exercise, result = _service(db, tracker).submit_answer(
            current_user.id,
            exercise_id,
            payload.user_response,
            hints_used=payload.hints_used,
            completion_time=payload.completion_time,
        )
    except (MiningSessionNotFoundError, MiningSessionClosedError) as exc:
        raise _translate(exc) from exc
    return MiningAnswerResponse(
        exercise=MiningExerciseRead.model_validate(exercise),
        is_correct=result.is_correct,
        accuracy=result.accuracy,
        feedback=result.feedback,
        category=result.category,
    )


@router.post("/sessions/{session_id}/complete", response_model=MiningSessionSummary)
def complete_session(
    session_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    tracker: SessionWordTracker = Depends(deps.get_session_tracker),
):
    try:
        return _service(db, tracker).complete_session(current_user.id, session_id)
    except MiningSessionNotFoundError as exc:
        raise _translate(exc) from exc
