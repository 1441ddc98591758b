"""Word mastery schemas."""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WordReviewRequest(BaseModel):
    word: str = Field(min_length=1, max_length=255)
    language: str = Field(min_length=1, max_length=20)
    is_correct: bool


class KnownWordRead(BaseModel):
    word: str
    language: str
    mastery_level: int
    review_count: int
    correct_count: int
    accuracy: float
    last_reviewed_at: Optional[datetime] = None
    next_review_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)


class WordPerformanceRead(KnownWordRead):
    mastery_score: float
    is_struggling: bool
    is_mastered: bool


class MasteryStatsRead(BaseModel):
    total_mastered: int
    sentence_mining_mastered: int
    regular_exercise_mastered: int
    bidirectional_mastered: int
    breakdown: Dict[str, float] = Field(default_factory=dict)


class MasteryAchievement(BaseModel):
    word: str
    source: str
    mastered_at: Optional[datetime] = None


class WordMasteredResponse(BaseModel):
    word: str
    language: str
    is_mastered: bool


class LevelRead(BaseModel):
    level: str
    title: str
    description: str
    cefr_equivalent: str
    min_words: int
    max_words: Optional[int] = None
    mastered_words: int
    words_to_next_level: int
    progress: int


class ReviewQueueResponse(BaseModel):
    items: List[KnownWordRead]
