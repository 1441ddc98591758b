"""Tests for the in-process sentence mining word tracker."""
from __future__ import annotations

import uuid

from lwl.db.models import SentenceMiningExercise, SentenceMiningSession
from lwl.services.session_tracker import SessionWordTracker, load_recent_words


class FakeClock:
    def __init__(self) -> None:
        self.now = 1_000.0

    def __call__(self) -> float:
        return self.now


def test_session_words_are_bounded_and_case_insensitive() -> None:
    tracker = SessionWordTracker(session_word_limit=3)
    for word in ("Uno", "dos", "tres", "cuatro"):
        tracker.add_word_to_session("s1", word)

    assert tracker.get_session_words("s1") == ["dos", "tres", "cuatro"]
    assert tracker.is_word_used_in_session("s1", "CUATRO") is True
    assert tracker.is_word_used_in_session("s1", "uno") is False
    assert tracker.is_word_used_in_session("other", "dos") is False


def test_cooldown_expires_with_clock() -> None:
    clock = FakeClock()
    tracker = SessionWordTracker(cooldown_seconds=60, clock=clock)
    tracker.set_cooldown("u1", "Hola")

    assert tracker.is_word_in_cooldown("u1", "hola") is True
    assert tracker.is_word_in_cooldown("u2", "hola") is False

    clock.now += 61
    assert tracker.is_word_in_cooldown("u1", "hola") is False
    assert tracker.stats()["total_cooldowns"] == 0


def test_avoidance_list_merges_sources_without_duplicates() -> None:
    tracker = SessionWordTracker(clock=FakeClock())
    tracker.add_word_to_session("s1", "casa")
    tracker.set_cooldown("u1", "perro")
    tracker.set_cooldown("u1", "casa")

    avoid = tracker.get_avoidance_list("s1", "u1", ["Gato", "perro"])

    assert avoid == ["casa", "perro", "gato"]


def test_cleanup_and_clear_session() -> None:
    clock = FakeClock()
    tracker = SessionWordTracker(clock=clock)
    tracker.add_word_to_session("s1", "casa")
    tracker.set_cooldown("u1", "casa", duration_seconds=10)
    tracker.set_cooldown("u2", "perro", duration_seconds=100)

    clock.now += 50
    assert tracker.cleanup() == 1
    assert tracker.stats() == {"active_sessions": 1, "total_cooldowns": 1}

    tracker.clear_session("s1")
    assert tracker.get_session_words("s1") == []


def test_load_recent_words_from_latest_sessions(db_session, user) -> None:
    session = SentenceMiningSession(user_id=user.id, language="spanish", difficulty_level="beginner")
    db_session.add(session)
    db_session.flush()
    db_session.add_all(
        [
            SentenceMiningExercise(
                session_id=session.id,
                exercise_type="cloze",
                sentence="El perro come",
                target_words=["Perro"],
            ),
            SentenceMiningExercise(
                session_id=session.id,
                exercise_type="cloze",
                sentence="La casa del perro",
                target_words=["casa", "perro"],
            ),
        ]
    )
    db_session.commit()

    words = load_recent_words(db_session, user.id, "spanish")

    assert sorted(words) == ["casa", "perro"]
    assert load_recent_words(db_session, user.id, "french") == []
    assert load_recent_words(db_session, uuid.uuid4(), "spanish") == []
