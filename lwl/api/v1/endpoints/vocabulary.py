"""Vocabulary endpoints."""
from __future__ import annotations

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from lwl.api import deps
from lwl.db.models.user import User
from lwl.schemas.vocabulary import (
    VocabularyInfo,
    VocabularyInfoRequest,
    VocabularyItemCreate,
    VocabularyItemRead,
    VocabularyListResponse,
)
from lwl.services.llm_service import LLMService
from lwl.services.sentence_generator import SentenceGenerator
from lwl.services.vocabulary import VocabularyNotFoundError, VocabularyService
from lwl.utils.exceptions import LwlException, to_http_exception

router = APIRouter(prefix="/vocabulary", tags=["vocabulary"])


@router.get("/", response_model=VocabularyListResponse)
def list_vocabulary(
    language: Optional[str] = Query(default=None, max_length=20),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> VocabularyListResponse:
    service = VocabularyService(db)
    items = service.list_items(current_user.id, language=language, limit=limit, offset=offset)
    return VocabularyListResponse(
        total=service.count(current_user.id, language=language),
        items=[VocabularyItemRead.model_validate(item) for item in items],
    )


@router.post("/", response_model=VocabularyItemRead, status_code=status.HTTP_201_CREATED)
def save_vocabulary(
    payload: VocabularyItemCreate,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """Save a word; saving the same word twice returns the stored entry."""

    return VocabularyService(db).save(current_user.id, payload)


@router.post("/info", response_model=VocabularyInfo)
def vocabulary_info(
    payload: VocabularyInfoRequest,
    current_user: User = Depends(deps.get_current_user),
    llm_service: LLMService = Depends(deps.get_llm_service),
) -> VocabularyInfo:
    """Suggest a definition and example sentence before the learner saves a word."""

    try:
        info = SentenceGenerator(llm_service).vocabulary_info(payload.word, payload.language)
    except LwlException as exc:
        raise to_http_exception(exc) from exc
    return VocabularyInfo(**info)


@router.get("/export")
def export_vocabulary(
    format: Literal["json", "csv"] = "json",
    language: Optional[str] = Query(default=None, max_length=20),
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Response:
    service = VocabularyService(db)
    if format == "csv":
        body = service.export_csv(current_user.id, language)
        media_type = "text/csv"
    else:
        body = service.export_json(current_user.id, language)
        media_type = "application/json"
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="vocabulary.{format}"'},
    )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vocabulary(
    item_id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Response:
    try:
        VocabularyService(db).delete(current_user.id, item_id)
    except VocabularyNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
