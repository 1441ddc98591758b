"""IPA phonetic transcription through the chat-completion service."""
from __future__ import annotations

from loguru import logger

from lwl.services.llm_service import LLMProviderError, LLMService
from lwl.utils.cache import ApiCache, api_cache, build_cache_key
from lwl.utils.exceptions import ExternalServiceError, ValidationError

TRANSCRIPTION_TTL_SECONDS = 24 * 60 * 60


def _system_prompt(language: str) -> str:
    return (
        "You are a phonetic transcription expert. Provide accurate phonetic transcription using "
        f"International Phonetic Alphabet (IPA) symbols for the given text in {language}. "
        "Return only the phonetic transcription without any additional text or explanations."
    )


class TranscriptionService:
    def __init__(self, llm_service: LLMService, cache: ApiCache = api_cache):
        self.llm_service = llm_service
        self.cache = cache

    def transcribe(self, text: str | None, language: str | None) -> str:
        if not text or not text.strip() or not language or not language.strip():
            raise ValidationError("Text and language are required")

        def fetch() -> str:
            result = self.llm_service.generate_chat_completion(
                [
                    {
                        "role": "user",
                        "content": f'Please provide the phonetic transcription for this {language} text: "{text}"',
                    }
                ],
                temperature=0.3,
                max_tokens=500,
                system_prompt=_system_prompt(language),
            )
            return result.content.strip()

        key = "transcription:" + build_cache_key(text=text.strip(), language=language.strip().lower())
        try:
            return self.cache.get(key, fetch, ttl=TRANSCRIPTION_TTL_SECONDS)
        except LLMProviderError as exc:
            logger.error("Phonetic transcription failed", language=language)
            raise ExternalServiceError("Failed to generate transcription") from exc
