"""Streak and shadowing progress schemas."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class StreakRead(BaseModel):
    language: str
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date] = None
    status: Literal["active", "at_risk", "broken"]
    hours_remaining: Optional[int] = None


class ShadowingExerciseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    language: str = Field(min_length=1, max_length=20)
    sentences: list[str] = Field(min_length=1)


class ShadowingExerciseRead(BaseModel):
    id: uuid.UUID
    title: str
    language: str
    sentences: list[str]

    model_config = ConfigDict(from_attributes=True)


class ShadowingProgressUpdate(BaseModel):
    sentence_index: int = Field(ge=0)
    total_sentences: int = Field(ge=1)


class ShadowingProgressRead(BaseModel):
    shadowing_exercise_id: uuid.UUID
    current_sentence_index: int
    completed_sentences: int
    total_sentences: int
    completion_percentage: float
    last_practiced_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
