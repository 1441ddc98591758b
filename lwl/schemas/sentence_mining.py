"""Sentence mining schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DifficultyLevel = Literal["beginner", "intermediate", "advanced"]


class SessionStartRequest(BaseModel):
    language: str = Field(min_length=1, max_length=20)
    difficulty_level: DifficultyLevel = "beginner"
    exercise_types: List[str] = Field(default_factory=lambda: ["cloze"])


class MiningExerciseCreate(BaseModel):
    sentence: str = Field(min_length=1, max_length=2000)
    cloze_sentence: str = Field(min_length=1, max_length=2000)
    translation: Optional[str] = Field(default=None, max_length=2000)
    target_words: List[str] = Field(min_length=1)
    unknown_words: List[str] = Field(default_factory=list)
    difficulty_score: float = Field(default=0.0, ge=0.0)

    @field_validator("target_words")
    @classmethod
    def strip_target_words(cls, value: List[str]) -> List[str]:
        words = [word.strip() for word in value if word and word.strip()]
        if not words:
            raise ValueError("At least one target word is required")
        return words


class MiningAnswerRequest(BaseModel):
    user_response: str = Field(max_length=500)
    hints_used: int = Field(default=0, ge=0)
    completion_time: Optional[int] = Field(default=None, ge=0)


class MiningExerciseRead(BaseModel):
    id: uuid.UUID
    session_id: uuid.UUID
    exercise_type: str
    sentence: str
    cloze_sentence: Optional[str] = None
    translation: Optional[str] = None
    target_words: List[str]
    unknown_words: List[str]
    difficulty_score: float
    user_response: Optional[str] = None
    is_correct: Optional[bool] = None
    hints_used: int = 0
    completion_time: Optional[int] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MiningAnswerResponse(BaseModel):
    exercise: MiningExerciseRead
    is_correct: bool
    accuracy: int
    feedback: str
    category: str


class MiningSessionRead(BaseModel):
    id: uuid.UUID
    language: str
    difficulty_level: str
    exercise_types: List[str] = Field(default_factory=list)
    total_exercises: int
    correct_exercises: int
    new_words_encountered: int
    words_mastered: int
    accuracy: float
    session_data: Optional[Dict[str, Any]] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MiningSessionSummary(MiningSessionRead):
    exercises: List[MiningExerciseRead] = Field(default_factory=list)
