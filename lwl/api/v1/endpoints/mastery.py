"""Word mastery and spaced repetition endpoints."""
from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.core import levels
from lwl.db.models.user import User
from lwl.schemas.mastery import (
    KnownWordRead,
    LevelRead,
    MasteryAchievement,
    MasteryStatsRead,
    ReviewQueueResponse,
    WordMasteredResponse,
    WordPerformanceRead,
    WordReviewRequest,
)
from lwl.services.spaced_repetition import SpacedRepetitionEngine
from lwl.services.word_mastery import WordMasteryService

router = APIRouter(prefix="/mastery", tags=["mastery"])


@router.post("/review", response_model=WordPerformanceRead)
def review_word(
    payload: WordReviewRequest,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> WordPerformanceRead:
    """Record one correct or incorrect recall of a word."""

    engine = SpacedRepetitionEngine(db)
    engine.update_word_performance(current_user.id, payload.word, payload.language, payload.is_correct)
    performance = engine.get_word_performance(current_user.id, payload.word, payload.language)
    return WordPerformanceRead(**asdict(performance))


@router.get("/words/{language}/{word}", response_model=WordPerformanceRead)
def word_performance(
    language: str,
    word: str,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> WordPerformanceRead:
    performance = SpacedRepetitionEngine(db).get_word_performance(current_user.id, word, language)
    if performance is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Word not tracked yet")
    return WordPerformanceRead(**asdict(performance))


@router.get("/due/{language}", response_model=ReviewQueueResponse)
def words_due(
    language: str,
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ReviewQueueResponse:
    words = SpacedRepetitionEngine(db).get_words_for_review(current_user.id, language, limit=limit)
    return ReviewQueueResponse(items=[KnownWordRead.model_validate(word) for word in words])


@router.get("/struggling/{language}", response_model=ReviewQueueResponse)
def struggling_words(
    language: str,
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ReviewQueueResponse:
    words = SpacedRepetitionEngine(db).get_struggling_words(current_user.id, language, limit=limit)
    return ReviewQueueResponse(items=[KnownWordRead.model_validate(word) for word in words])


@router.get("/stats/{language}", response_model=MasteryStatsRead)
def mastery_stats(
    language: str,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> MasteryStatsRead:
    stats = WordMasteryService(db).get_mastery_stats(current_user.id, language)
    return MasteryStatsRead(**asdict(stats))


@router.get("/achievements/{language}", response_model=list[MasteryAchievement])
def recent_achievements(
    language: str,
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> list[MasteryAchievement]:
    items = WordMasteryService(db).get_recent_mastery_achievements(current_user.id, language, limit)
    return [MasteryAchievement(**asdict(item)) for item in items]


@router.get("/is-mastered/{language}/{word}", response_model=WordMasteredResponse)
def word_is_mastered(
    language: str,
    word: str,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> WordMasteredResponse:
    mastered = WordMasteryService(db).is_word_mastered(current_user.id, word, language)
    return WordMasteredResponse(word=word, language=language, is_mastered=mastered)


@router.get("/level/{language}", response_model=LevelRead)
def vocabulary_level(
    language: str,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> LevelRead:
    mastered = WordMasteryService(db).get_mastery_stats(current_user.id, language).total_mastered
    info = levels.level_for(mastered)
    return LevelRead(
        **asdict(info),
        mastered_words=mastered,
        words_to_next_level=levels.words_to_next_level(mastered),
        progress=levels.level_progress(mastered),
    )
