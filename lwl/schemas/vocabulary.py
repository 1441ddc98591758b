"""Vocabulary schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class VocabularyItemCreate(BaseModel):
    word: str = Field(min_length=1, max_length=255)
    language: str = Field(min_length=1, max_length=20)
    definition: str = Field(default="", max_length=5000)
    example_sentence: str = Field(default="", max_length=5000)
    explanation: Optional[str] = Field(default=None, max_length=5000)
    audio_url: Optional[str] = Field(default=None, max_length=1024)
    exercise_id: Optional[uuid.UUID] = None


class VocabularyItemRead(BaseModel):
    id: uuid.UUID
    word: str
    language: str
    definition: str
    example_sentence: str
    explanation: Optional[str] = None
    audio_url: Optional[str] = None
    exercise_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VocabularyListResponse(BaseModel):
    total: int
    items: List[VocabularyItemRead]


class VocabularyInfoRequest(BaseModel):
    word: str = Field(min_length=1, max_length=255)
    language: str = Field(min_length=1, max_length=20)


class VocabularyInfo(BaseModel):
    definition: str
    example_sentence: str
