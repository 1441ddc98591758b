"""Phonetic transcription tests."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from lwl.api import deps
from lwl.services.llm_service import LLMProviderError, LLMResult, LLMService
from lwl.services.transcription import TranscriptionService
from lwl.utils.cache import ApiCache
from lwl.utils.exceptions import ExternalServiceError, ValidationError


class CountingProvider:
    name = "openai"

    def __init__(self, should_fail: bool = False) -> None:
        self.calls = 0
        self.should_fail = should_fail

    def generate(self, messages, **kwargs):
        self.calls += 1
        if self.should_fail:
            raise LLMProviderError("provider down")
        return LLMResult(
            provider=self.name,
            model="stub",
            content=" /ˈola/ ",
            prompt_tokens=1,
            completion_tokens=1,
            total_tokens=2,
            raw_response={},
        )


def test_transcription_is_cached() -> None:
    provider = CountingProvider()
    service = TranscriptionService(LLMService(providers=[provider]), cache=ApiCache())

    assert service.transcribe("Hola", "Spanish") == "/ˈola/"
    assert service.transcribe("Hola", "spanish") == "/ˈola/"
    assert provider.calls == 1


@pytest.mark.parametrize("text,language", [("", "spanish"), ("Hola", None), ("   ", "spanish")])
def test_transcription_requires_text_and_language(text, language) -> None:
    service = TranscriptionService(LLMService(providers=[CountingProvider()]), cache=ApiCache())

    with pytest.raises(ValidationError):
        service.transcribe(text, language)


def test_provider_failure_becomes_external_error() -> None:
    service = TranscriptionService(LLMService(providers=[CountingProvider(should_fail=True)]), cache=ApiCache())

    with pytest.raises(ExternalServiceError):
        service.transcribe("Hola", "spanish")


def test_transcription_endpoint(app, client: TestClient) -> None:
    app.dependency_overrides[deps.get_llm_service] = lambda: LLMService(providers=[CountingProvider()])

    response = client.post("/api/v1/transcription/phonetic", json={"text": "Hola", "language": "spanish"})
    assert response.status_code == 200
    assert response.json() == {"transcription": "/ˈola/"}

    missing = client.post("/api/v1/transcription/phonetic", json={"text": "Hola"})
    assert missing.status_code == 400


def test_transcription_unavailable_without_provider(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(LLMService, "_build_default_providers", lambda self: [])

    response = client.post("/api/v1/transcription/phonetic", json={"text": "Hola", "language": "spanish"})

    assert response.status_code == 503
    assert response.json()["detail"] == "LLM providers are not configured"
