"""Exercise schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExerciseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    text: str = Field(min_length=1, max_length=20000)
    language: str = Field(min_length=1, max_length=20)
    tags: List[str] = Field(default_factory=list)
    audio_url: Optional[str] = Field(default=None, max_length=1024)


class ExerciseRead(BaseModel):
    id: uuid.UUID
    title: str
    text: str
    language: str
    tags: List[str] = Field(default_factory=list)
    audio_url: Optional[str] = None
    completion_count: int = 0
    is_completed: bool = False
    archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReadingCountResponse(BaseModel):
    language: str
    count: int
