"""In-process memory of words used recently in sentence mining."""
from __future__ import annotations

import threading
import time
import uuid
from typing import Callable, Iterable, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from lwl.db.models.sentence_mining import SentenceMiningExercise, SentenceMiningSession

SESSION_WORD_LIMIT = 15
COOLDOWN_SECONDS = 24 * 60 * 60
RECENT_SESSION_COUNT = 3
RECENT_EXERCISE_COUNT = 30


class SessionWordTracker:
    """Track words per session and per-user cooldowns so sentences do not repeat targets.

    State lives in this process only and is lost on restart.
    """

    def __init__(
        self,
        *,
        session_word_limit: int = SESSION_WORD_LIMIT,
        cooldown_seconds: float = COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.session_word_limit = session_word_limit
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # dicts keep insertion order, so trimming drops the oldest words
        self._session_words: dict[str, dict[str, None]] = {}
        self._cooldowns: dict[str, dict[str, float]] = {}

    def add_word_to_session(self, session_id: str | uuid.UUID, word: str) -> None:
        key = str(session_id)
        with self._lock:
            words = self._session_words.setdefault(key, {})
            words[word.lower()] = None
            while len(words) > self.session_word_limit:
                words.pop(next(iter(words)))

    def is_word_used_in_session(self, session_id: str | uuid.UUID, word: str) -> bool:
        with self._lock:
            return word.lower() in self._session_words.get(str(session_id), {})

    def get_session_words(self, session_id: str | uuid.UUID) -> list[str]:
        with self._lock:
            return list(self._session_words.get(str(session_id), {}))

    def set_cooldown(self, user_id: str | uuid.UUID, word: str, duration_seconds: Optional[float] = None) -> None:
        until = self._clock() + (self.cooldown_seconds if duration_seconds is None else duration_seconds)
        with self._lock:
            self._cooldowns.setdefault(str(user_id), {})[word.lower()] = until

    def is_word_in_cooldown(self, user_id: str | uuid.UUID, word: str) -> bool:
        key = word.lower()
        with self._lock:
            cooldowns = self._cooldowns.get(str(user_id))
            if not cooldowns or key not in cooldowns:
                return False
            if self._clock() < cooldowns[key]:
                return True
            del cooldowns[key]
            return False

    def _active_cooldowns(self, user_id: str) -> list[str]:
        cooldowns = self._cooldowns.get(user_id)
        if not cooldowns:
            return []
        now = self._clock()
        for word in [word for word, until in cooldowns.items() if until <= now]:
            del cooldowns[word]
        return list(cooldowns)

    def get_avoidance_list(
        self, session_id: str | uuid.UUID, user_id: str | uuid.UUID, recent_words: Iterable[str] = ()
    ) -> list[str]:
        """Union of session words, active cooldowns and ``recent_words``, first occurrence wins."""

        with self._lock:
            session_words = list(self._session_words.get(str(session_id), {}))
            cooldown_words = self._active_cooldowns(str(user_id))
        combined = [*session_words, *cooldown_words, *(word.lower() for word in recent_words)]
        return list(dict.fromkeys(combined))

    def clear_session(self, session_id: str | uuid.UUID) -> None:
        with self._lock:
            self._session_words.pop(str(session_id), None)

    def cleanup(self) -> int:
        """Drop expired cooldowns for every user; returns how many were removed."""

        removed = 0
        with self._lock:
            for user_id in list(self._cooldowns):
                before = len(self._cooldowns[user_id])
                remaining = self._active_cooldowns(user_id)
                removed += before - len(remaining)
                if not remaining:
                    del self._cooldowns[user_id]
        if removed:
            logger.debug("Expired word cooldowns removed", count=removed)
        return removed

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "active_sessions": len(self._session_words),
                "total_cooldowns": sum(len(words) for words in self._cooldowns.values()),
            }

    def reset(self) -> None:
        with self._lock:
            self._session_words.clear()
            self._cooldowns.clear()


def load_recent_words(db: Session, user_id: uuid.UUID, language: str) -> list[str]:
    """Target words from the latest exercises of the user's most recent sessions."""

    session_ids = list(
        db.scalars(
            select(SentenceMiningSession.id)
            .where(
                SentenceMiningSession.user_id == user_id,
                SentenceMiningSession.language == language,
            )
            .order_by(SentenceMiningSession.created_at.desc())
            .limit(RECENT_SESSION_COUNT)
        )
    )
    if not session_ids:
        return []

    target_lists = db.scalars(
        select(SentenceMiningExercise.target_words)
        .where(SentenceMiningExercise.session_id.in_(session_ids))
        .order_by(SentenceMiningExercise.created_at.desc())
        .limit(RECENT_EXERCISE_COUNT)
    )
    words = [word.lower() for targets in target_lists for word in (targets or [])]
    return list(dict.fromkeys(words))


session_word_tracker = SessionWordTracker()

__all__ = ["SessionWordTracker", "load_recent_words", "session_word_tracker"]
