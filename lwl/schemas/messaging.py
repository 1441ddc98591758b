"""Feedback, contact, transcription and visitor schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedbackCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class FeedbackRead(BaseModel):
    id: uuid.UUID
    name: str
    email: Optional[str] = None
    message: str
    read: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SuccessResponse(BaseModel):
    success: bool = True
    message: str


class ContactCreate(BaseModel):
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)


class ContactResponse(BaseModel):
    success: bool = True
    id: Optional[str] = None


class TranscriptionRequest(BaseModel):
    text: Optional[str] = Field(default=None, max_length=2000)
    language: Optional[str] = Field(default=None, max_length=40)


class TranscriptionResponse(BaseModel):
    transcription: str


class VisitorTrack(BaseModel):
    visitor_id: str = Field(min_length=1, max_length=64)
    page: str = Field(min_length=1, max_length=512)
    referer: Optional[str] = Field(default=None, max_length=2048)
    user_agent: Optional[str] = Field(default=None, max_length=1024)


class ButtonClickTrack(BaseModel):
    visitor_id: str = Field(min_length=1, max_length=64)
    button_name: str = Field(min_length=1, max_length=100)


class CountEntry(BaseModel):
    value: str
    count: int


class VisitorReport(BaseModel):
    top_pages: List[CountEntry]
    top_referrers: List[CountEntry]
    unique_visitors: int
