"""Tests for bidirectional translation exercises."""
from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from lwl.api import deps
from lwl.db.models import BidirectionalMasteredWord, VocabularyItem
from lwl.schemas.bidirectional import BidirectionalCreate, BidirectionalReviewCreate
from lwl.services.bidirectional import BidirectionalNotFoundError, BidirectionalService, extract_words
from lwl.services.llm_service import LLMProviderError, LLMResult, LLMService

TODAY = date(2024, 5, 1)
SENTENCE = "El gato duerme en la casa."


class TranslationProvider:
    name = "openai"

    def __init__(self, content: str = '{"normal": "The cat sleeps in the house.", "literal": "The cat sleeps in the house."}', should_fail: bool = False):
        self.content = content
        self.should_fail = should_fail

    def generate(self, messages, **kwargs):
        if self.should_fail:
            raise LLMProviderError("openai failure")
        return LLMResult(
            provider=self.name,
            model="stub",
            content=self.content,
            prompt_tokens=1,
            completion_tokens=1,
            total_tokens=2,
            raw_response={},
        )


def _create(db_session, user, llm_service=None):
    service = BidirectionalService(db_session, llm_service)
    exercise = service.create(
        user.id,
        BidirectionalCreate(original_sentence=SENTENCE, target_language="spanish", support_language="english"),
    )
    return service, exercise


def _review(service, user, exercise, review_type: str, is_correct: bool = True, day: date = TODAY):
    return service.record_review(
        user.id,
        exercise.id,
        BidirectionalReviewCreate(review_type=review_type, user_recall_attempt="attempt", is_correct=is_correct),
        today=day,
    )


def test_extract_words_drops_short_words_and_punctuation() -> None:
    assert extract_words("El gato, el GATO y la casa!") == ["gato", "casa"]


def test_create_uses_llm_translations(db_session, user) -> None:
    _, exercise = _create(db_session, user, LLMService(providers=[TranslationProvider()]))

    assert exercise.normal_translation == "The cat sleeps in the house."
    assert exercise.status == "learning"


def test_create_survives_translation_failure(db_session, user) -> None:
    _, exercise = _create(db_session, user, LLMService(providers=[TranslationProvider(should_fail=True)]))

    assert exercise.normal_translation is None
    assert exercise.literal_translation is None


def test_review_schedule_steps(db_session, user) -> None:
    service, exercise = _create(db_session, user)

    first = _review(service, user, exercise, "forward")
    second = _review(service, user, exercise, "forward")
    wrong = _review(service, user, exercise, "forward", is_correct=False)
    backward = _review(service, user, exercise, "backward")

    assert (first.review_round, first.due_date) == (1, TODAY + timedelta(days=1))
    assert (second.review_round, second.due_date) == (2, TODAY + timedelta(days=3))
    assert (wrong.review_round, wrong.due_date) == (3, TODAY + timedelta(days=1))
    assert (backward.review_round, backward.due_date) == (1, TODAY + timedelta(days=1))


def test_exercise_mastered_after_three_correct_in_both_directions(db_session, user) -> None:
    service, exercise = _create(db_session, user)
    for _ in range(3):
        _review(service, user, exercise, "forward")

    words = db_session.query(BidirectionalMasteredWord).filter_by(user_id=user.id).all()
    assert sorted(word.word for word in words) == ["casa", "duerme", "gato"]
    assert exercise.status == "learning"

    for _ in range(3):
        _review(service, user, exercise, "backward")

    assert service.get(user.id, exercise.id).status == "mastered"
    assert db_session.query(BidirectionalMasteredWord).count() == 3
    vocabulary = db_session.query(VocabularyItem).filter_by(user_id=user.id).all()
    assert {item.word for item in vocabulary} == {"casa", "duerme", "gato"}
    assert all(item.exercise_id == exercise.id for item in vocabulary)


def test_due_reviews_only_for_reviewing_exercises(db_session, user) -> None:
    service, exercise = _create(db_session, user)
    assert service.get_due_reviews(user.id, today=TODAY) == []

    service.promote_to_reviewing(user.id, exercise.id)
    due = service.get_due_reviews(user.id, today=TODAY)
    assert [review_type for _, review_type in due] == ["forward", "backward"]

    _review(service, user, exercise, "forward")
    due = service.get_due_reviews(user.id, today=TODAY)
    assert [review_type for _, review_type in due] == ["backward"]

    due_later = service.get_due_reviews(user.id, today=TODAY + timedelta(days=1))
    assert [review_type for _, review_type in due_later] == ["forward", "backward"]


def test_delete_removes_mastered_words(db_session, user) -> None:
    service, exercise = _create(db_session, user)
    for _ in range(3):
        _review(service, user, exercise, "forward")

    service.delete(user.id, exercise.id)

    assert db_session.query(BidirectionalMasteredWord).count() == 0
    with pytest.raises(BidirectionalNotFoundError):
        service.get(user.id, exercise.id)


def test_bidirectional_api_flow(app, client: TestClient, auth_headers) -> None:
    app.dependency_overrides[deps.get_optional_llm_service] = lambda: LLMService(providers=[TranslationProvider()])

    created = client.post(
        "/api/v1/bidirectional/exercises",
        json={"original_sentence": SENTENCE, "target_language": "spanish", "support_language": "english"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    exercise = created.json()
    assert exercise["literal_translation"] == "The cat sleeps in the house."

    patched = client.patch(
        f"/api/v1/bidirectional/exercises/{exercise['id']}",
        json={"user_forward_translation": "The cat sleeps at home"},
        headers=auth_headers,
    )
    assert patched.json()["user_forward_translation"] == "The cat sleeps at home"

    started = client.post(f"/api/v1/bidirectional/exercises/{exercise['id']}/start-review", headers=auth_headers)
    assert started.json()["status"] == "reviewing"

    due = client.get("/api/v1/bidirectional/reviews/due", headers=auth_headers).json()
    assert len(due["items"]) == 2

    review = client.post(
        f"/api/v1/bidirectional/exercises/{exercise['id']}/reviews",
        json={"review_type": "forward", "user_recall_attempt": "El gato duerme", "is_correct": True},
        headers=auth_headers,
    )
    assert review.status_code == 201
    assert review.json()["review_round"] == 1

    listed = client.get("/api/v1/bidirectional/exercises?status=reviewing", headers=auth_headers).json()
    assert [item["id"] for item in listed] == [exercise["id"]]

    deleted = client.delete(f"/api/v1/bidirectional/exercises/{exercise['id']}", headers=auth_headers)
    assert deleted.status_code == 204
    missing = client.get(f"/api/v1/bidirectional/exercises/{exercise['id']}", headers=auth_headers)
    assert missing.status_code == 404


def test_create_without_llm_configured(client: TestClient, auth_headers, monkeypatch) -> None:
    monkeypatch.setattr(LLMService, "_build_default_providers", lambda self: [])

    response = client.post(
        "/api/v1/bidirectional/exercises",
        json={"original_sentence": SENTENCE, "target_language": "spanish", "support_language": "english"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["normal_translation"] is None
