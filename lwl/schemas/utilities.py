"""Schemas for stateless utility endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ValidateInputRequest(BaseModel):
    text: Optional[str] = None
    max_length: int = Field(default=1000, ge=1, le=100000)
    allow_html: bool = False
    required: bool = True


class ValidateInputResponse(BaseModel):
    is_valid: bool
    error: Optional[str] = None
    sanitized: str = ""


class TextSelectionRequest(BaseModel):
    text: str = Field(max_length=20000)


class TextSelectionResponse(BaseModel):
    text: str
    word_count: int
    character_count: int
    is_valid_for_dictation: bool
    is_valid_for_vocabulary: bool
    is_valid_for_translation: bool
    selection_type: Literal["word", "phrase", "sentence", "paragraph"]
    recommendation: str


class CompareRequest(BaseModel):
    expected: str = Field(max_length=20000)
    actual: str = Field(max_length=20000)


class CompareResponse(BaseModel):
    accuracy: int
    differences: List[str]


class PriceRead(BaseModel):
    plan_id: str
    name: str
    interval: Optional[str] = None
    interval_count: int = 1
    currency: str
    symbol: str
    amount: float
    formatted: str


class AdminStatsRead(BaseModel):
    total_users: int
    total_exercises: int
    total_subscribers: int
    premium_subscribers: int
    unread_feedback: int
    unique_visitors: int
    mastered_words: int


class BucketResponse(BaseModel):
    message: str
    created: bool
