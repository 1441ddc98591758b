"""Saved vocabulary: upsert, listing and export."""
from __future__ import annotations

import csv
import io
import json
import uuid
from typing import Optional

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lwl.db.models.vocabulary import VocabularyItem
from lwl.schemas.vocabulary import VocabularyItemCreate

EXPORT_FIELDS = ("word", "language", "definition", "example_sentence", "explanation", "audio_url", "created_at")


class VocabularyNotFoundError(ValueError):
    """Raised when a vocabulary item cannot be located."""


class VocabularyService:
    def __init__(self, db: Session):
        self.db = db

    def _find(self, user_id: uuid.UUID, word: str, language: str) -> Optional[VocabularyItem]:
        return self.db.scalar(
            select(VocabularyItem).where(
                VocabularyItem.user_id == user_id,
                VocabularyItem.word == word,
                VocabularyItem.language == language,
            )
        )

    def save(self, user_id: uuid.UUID, payload: VocabularyItemCreate, *, commit: bool = True) -> VocabularyItem:
        """Insert a word; an existing (word, language) entry is returned unchanged."""

        word = payload.word.strip()
        existing = self._find(user_id, word, payload.language)
        if existing is not None:
            return existing

        item = VocabularyItem(
            user_id=user_id,
            word=word,
            language=payload.language,
            definition=payload.definition,
            example_sentence=payload.example_sentence,
            explanation=payload.explanation,
            audio_url=payload.audio_url,
            exercise_id=payload.exercise_id,
        )
        self.db.add(item)
        if commit:
            self.db.commit()
            self.db.refresh(item)
        else:
            self.db.flush()
        logger.debug("Vocabulary saved", word=word, language=payload.language)
        return item

    def list_items(
        self,
        user_id: uuid.UUID,
        *,
        language: Optional[str] = None,
        limit: Optional[int] = 100,
        offset: int = 0,
    ) -> list[VocabularyItem]:
        stmt = select(VocabularyItem).where(VocabularyItem.user_id == user_id)
        if language:
            stmt = stmt.where(VocabularyItem.language == language)
        stmt = stmt.order_by(VocabularyItem.created_at.desc(), VocabularyItem.word).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt))

    def count(self, user_id: uuid.UUID, *, language: Optional[str] = None) -> int:
        stmt = select(func.count(VocabularyItem.id)).where(VocabularyItem.user_id == user_id)
        if language:
            stmt = stmt.where(VocabularyItem.language == language)
        return int(self.db.scalar(stmt) or 0)

    def delete(self, user_id: uuid.UUID, item_id: uuid.UUID) -> None:
        item = self.db.get(VocabularyItem, item_id)
        if item is None or item.user_id != user_id:
            raise VocabularyNotFoundError("Vocabulary item not found")
        self.db.delete(item)
        self.db.commit()

    def _rows(self, user_id: uuid.UUID, language: Optional[str]) -> list[dict]:
        rows = []
        for item in self.list_items(user_id, language=language, limit=None):
            row = {name: getattr(item, name) for name in EXPORT_FIELDS}
            row["created_at"] = item.created_at.isoformat() if item.created_at else None
            rows.append(row)
        return rows

    def export_json(self, user_id: uuid.UUID, language: Optional[str] = None) -> str:
        return json.dumps(self._rows(user_id, language), ensure_ascii=False, indent=2)

    def export_csv(self, user_id: uuid.UUID, language: Optional[str] = None) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in self._rows(user_id, language):
            writer.writerow({key: "" if value is None else value for key, value in row.items()})
        return buffer.getvalue()
