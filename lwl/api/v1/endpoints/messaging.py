"""Feedback, mailing list, transcription and visitor tracking endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.schemas.messaging import (
    ButtonClickTrack,
    ContactCreate,
    ContactResponse,
    FeedbackCreate,
    SuccessResponse,
    TranscriptionRequest,
    TranscriptionResponse,
    VisitorTrack,
)
from lwl.services.email_service import EmailClient
from lwl.services.feedback import FeedbackService
from lwl.services.llm_service import LLMService
from lwl.services.transcription import TranscriptionService
from lwl.services.visitors import VisitorService
from lwl.utils.exceptions import LwlException, to_http_exception

router = APIRouter(tags=["messaging"])


@router.post("/feedback", response_model=SuccessResponse)
def submit_feedback(payload: FeedbackCreate, db: Session = Depends(deps.get_db)) -> SuccessResponse:
    try:
        FeedbackService(db).submit(payload.name, payload.email, payload.message)
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return SuccessResponse(message="Feedback submitted successfully")


@router.post("/contacts", response_model=ContactResponse)
def create_contact(payload: ContactCreate) -> ContactResponse:
    """Add an email address to the newsletter audience."""

    try:
        data = EmailClient().create_contact(payload.email, payload.first_name, payload.last_name)
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return ContactResponse(id=data.get("id"))


@router.post("/transcription/phonetic", response_model=TranscriptionResponse)
def phonetic_transcription(
    payload: TranscriptionRequest,
    llm_service: LLMService = Depends(deps.get_llm_service),
) -> TranscriptionResponse:
    try:
        transcription = TranscriptionService(llm_service).transcribe(payload.text, payload.language)
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return TranscriptionResponse(transcription=transcription)


@router.post("/visitors/track", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
def track_visit(
    payload: VisitorTrack,
    request: Request,
    db: Session = Depends(deps.get_db),
) -> SuccessResponse:
    referer: Optional[str] = payload.referer or request.headers.get("referer")
    try:
        VisitorService(db).track(
            payload.visitor_id,
            payload.page,
            referer=referer,
            user_agent=payload.user_agent or request.headers.get("user-agent"),
            ip_address=deps.get_client_ip(request),
        )
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return SuccessResponse(message="Visit recorded")


@router.post("/visitors/button-click", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
def track_button_click(
    payload: ButtonClickTrack,
    request: Request,
    db: Session = Depends(deps.get_db),
) -> SuccessResponse:
    try:
        VisitorService(db).track_button_click(
            payload.visitor_id,
            payload.button_name,
            user_agent=request.headers.get("user-agent"),
            ip_address=deps.get_client_ip(request),
        )
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return SuccessResponse(message="Click recorded")
