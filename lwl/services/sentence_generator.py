"""LLM-backed cloze sentences and vocabulary lookups."""
from __future__ import annotations

import json
import random
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from loguru import logger

from lwl.core.word_frequency import pick_target_word
from lwl.services.llm_service import LLMProviderError, LLMService
from lwl.utils.cache import ApiCache, api_cache, build_cache_key
from lwl.utils.exceptions import ExternalServiceError, ValidationError

CLOZE_BLANK = "___"
VOCABULARY_INFO_TTL_SECONDS = 24 * 60 * 60

DIFFICULTY_DESCRIPTIONS = {
    "beginner": "simple, common vocabulary and basic sentence structures",
    "intermediate": "moderate vocabulary and varied sentence patterns",
    "advanced": "complex vocabulary and sophisticated sentence structures",
}
SENTENCE_LENGTHS = {"beginner": "8-12", "intermediate": "12-18", "advanced": "15-25"}

GENERATOR_SYSTEM_PROMPT = (
    "You are a language learning expert. Create educational sentences that help students learn "
    "vocabulary in context. The target word must appear exactly as specified so it can be "
    "removed to form a cloze exercise. Always answer with a single JSON object."
)


@dataclass
class GeneratedSentence:
    sentence: str
    target_word: str
    cloze_sentence: str
    context: str
    difficulty: str
    language: str


def _parse_json_response(content: str) -> Dict[str, Any]:
    """Parse a JSON object from a completion, tolerating fenced code blocks."""

    fenced = re.search(r"```(?:json)?\s*([\s\S]*?)```", content)
    if fenced:
        content = fenced.group(1)
    content = content.strip()
    start, end = content.find("{"), content.rfind("}")
    if start != -1 and end > start:
        content = content[start : end + 1]
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise LLMProviderError("Completion was not valid JSON") from exc
    if not isinstance(data, dict):
        raise LLMProviderError("Completion was not a JSON object")
    return data


def make_cloze(sentence: str, target_word: str) -> Optional[str]:
    """Blank every whole-word occurrence of ``target_word``; ``None`` when there is none."""

    pattern = re.compile(rf"(?<!\w){re.escape(target_word)}(?!\w)", re.IGNORECASE)
    cloze, count = pattern.subn(CLOZE_BLANK, sentence)
    return cloze if count else None


def _sentence_prompt(language: str, difficulty: str, target_word: str, avoid: list[str]) -> str:
    lines = [
        f'Create a {difficulty} level sentence in {language} that naturally includes the word "{target_word}".',
        "",
        "Requirements:",
        f"- Use {DIFFICULTY_DESCRIPTIONS.get(difficulty, DIFFICULTY_DESCRIPTIONS['beginner'])}.",
        f'- The word "{target_word}" must be essential to the meaning and appear exactly as given.',
        f"- Use correct {language} grammar and natural word order.",
        f"- Length: {SENTENCE_LENGTHS.get(difficulty, SENTENCE_LENGTHS['beginner'])} words.",
    ]
    if avoid:
        lines.append(f"- Do not use any of these recently practised words: {', '.join(avoid)}.")
    lines += [
        "",
        'Respond with JSON: {"sentence": "...", "context": "...", "targetWord": "' + target_word + '"}',
    ]
    return "\n".join(lines)


class SentenceGenerator:
    """Builds cloze exercises and word definitions through :class:`LLMService`."""

    def __init__(
        self,
        llm_service: LLMService,
        *,
        cache: ApiCache = api_cache,
        rng: Optional[random.Random] = None,
    ):
        self.llm_service = llm_service
        self.cache = cache
        self.rng = rng or random.Random()

    def generate_sentence(
        self, language: str, difficulty: str, avoid: Iterable[str] = ()
    ) -> GeneratedSentence:
        if not language or not difficulty:
            raise ValidationError("Language and difficulty are required")
        avoid_list = [word for word in avoid if word]
        target_word = pick_target_word(language, difficulty, avoid_list, self.rng)
        logger.info("Generating cloze sentence", language=language, difficulty=difficulty, target=target_word)

        try:
            result = self.llm_service.generate_chat_completion(
                [{"role": "user", "content": _sentence_prompt(language, difficulty, target_word, avoid_list)}],
                temperature=0.7,
                max_tokens=500,
                response_format={"type": "json_object"},
                system_prompt=GENERATOR_SYSTEM_PROMPT,
            )
            data = _parse_json_response(result.content)
        except LLMProviderError as exc:
            logger.error("Cloze generation failed", language=language, error=str(exc))
            raise ExternalServiceError("Failed to generate sentence mining exercise") from exc

        sentence = str(data.get("sentence") or "").strip()
        target = str(data.get("targetWord") or target_word).strip()
        cloze = make_cloze(sentence, target) if sentence and target else None
        if cloze is None:
            logger.warning("Generated sentence is missing its target word", sentence=sentence, target=target)
            raise ExternalServiceError("Generated sentence does not contain the target word")

        return GeneratedSentence(
            sentence=sentence,
            target_word=target,
            cloze_sentence=cloze,
            context=str(data.get("context") or ""),
            difficulty=difficulty,
            language=language,
        )

    def vocabulary_info(self, word: str, language: str) -> Dict[str, str]:
        """Learner-friendly definition and example sentence for a word or phrase."""

        word, language = (word or "").strip(), (language or "").strip()
        if not word or not language:
            raise ValidationError("Word and language are required")

        def fetch() -> Dict[str, str]:
            result = self.llm_service.generate_chat_completion(
                [
                    {
                        "role": "user",
                        "content": (
                            f'Generate information about the word or phrase "{word}" in {language}. '
                            'Respond with JSON: {"definition": "...", "exampleSentence": "..."}. '
                            "Keep the definition concise and the example simple enough for learners."
                        ),
                    }
                ],
                temperature=0.3,
                max_tokens=400,
                response_format={"type": "json_object"},
                system_prompt="You are a helpful language learning assistant.",
            )
            data = _parse_json_response(result.content)
            return {
                "definition": str(data.get("definition") or ""),
                "example_sentence": str(data.get("exampleSentence") or data.get("example_sentence") or ""),
            }

        key = "vocabulary-info:" + build_cache_key(word=word.lower(), language=language.lower())
        try:
            return self.cache.get(key, fetch, ttl=VOCABULARY_INFO_TTL_SECONDS)
        except LLMProviderError as exc:
            logger.error("Vocabulary info generation failed", word=word, language=language)
            raise ExternalServiceError("Failed to generate vocabulary information") from exc
