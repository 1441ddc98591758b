"""Bidirectional exercise schemas."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ReviewType = Literal["forward", "backward"]
ExerciseStatus = Literal["learning", "reviewing", "mastered"]


class BidirectionalCreate(BaseModel):
    original_sentence: str = Field(min_length=1, max_length=2000)
    target_language: str = Field(min_length=1, max_length=20)
    support_language: str = Field(min_length=1, max_length=20)


class BidirectionalTranslationsUpdate(BaseModel):
    user_forward_translation: Optional[str] = Field(default=None, max_length=2000)
    user_back_translation: Optional[str] = Field(default=None, max_length=2000)
    reflection_notes: Optional[str] = Field(default=None, max_length=5000)


class BidirectionalReviewCreate(BaseModel):
    review_type: ReviewType
    user_recall_attempt: str = Field(max_length=2000)
    is_correct: bool
    feedback: Optional[str] = Field(default=None, max_length=2000)


class BidirectionalReviewRead(BaseModel):
    id: uuid.UUID
    exercise_id: uuid.UUID
    review_type: str
    user_recall_attempt: str
    is_correct: bool
    feedback: Optional[str] = None
    review_round: Optional[int] = None
    due_date: date
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BidirectionalExerciseRead(BaseModel):
    id: uuid.UUID
    original_sentence: str
    target_language: str
    support_language: str
    normal_translation: Optional[str] = None
    literal_translation: Optional[str] = None
    user_forward_translation: Optional[str] = None
    user_back_translation: Optional[str] = None
    reflection_notes: Optional[str] = None
    original_audio_url: Optional[str] = None
    status: ExerciseStatus
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DueReview(BaseModel):
    exercise: BidirectionalExerciseRead
    review_type: ReviewType


class MasteredWordRead(BaseModel):
    word: str
    language: str
    exercise_id: uuid.UUID
    mastered_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DueReviewList(BaseModel):
    items: List[DueReview]
