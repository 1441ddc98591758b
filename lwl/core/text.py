"""Text selection analysis and answer comparison."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

SelectionType = Literal["word", "phrase", "sentence", "paragraph"]
ExerciseKind = Literal["dictation", "vocabulary", "translation"]
AnswerCategory = Literal["exact", "close", "incorrect"]

_WHITESPACE = re.compile(r"\s+")
_VOCABULARY_PUNCTUATION = re.compile(r"[.,!?;:\"'()\[\]{}]")
_SINGLE_QUOTES = re.compile("[‘’‚‛′‵]")
_DOUBLE_QUOTES = re.compile("[“”„‟″‶]")
_DASHES = re.compile("[–—―]")
_COMPARE_PUNCTUATION = re.compile(r"[.!?;:,]")


@dataclass(frozen=True, slots=True)
class TextSelectionInfo:
    text: str
    word_count: int
    character_count: int
    is_valid_for_dictation: bool
    is_valid_for_vocabulary: bool
    is_valid_for_translation: bool
    selection_type: SelectionType


def count_words(text: str) -> int:
    return len([token for token in _WHITESPACE.split(text) if token])


def analyze_text_selection(text: str) -> TextSelectionInfo:
    """Classify a selected span and report which exercises it suits.

    The text is returned untouched; only counts are derived from it.
    """

    word_count = count_words(text)
    character_count = len(text)

    selection_type: SelectionType
    if word_count <= 1:
        selection_type = "word"
    elif word_count <= 5:
        selection_type = "phrase"
    elif word_count <= 15:
        selection_type = "sentence"
    else:
        selection_type = "paragraph"

    return TextSelectionInfo(
        text=text,
        word_count=word_count,
        character_count=character_count,
        is_valid_for_dictation=3 <= word_count <= 50 and character_count <= 500,
        is_valid_for_vocabulary=1 <= word_count <= 3 and character_count <= 100,
        is_valid_for_translation=2 <= word_count <= 30 and character_count <= 300,
        selection_type=selection_type,
    )


def selection_recommendation(info: TextSelectionInfo) -> str:
    if info.word_count == 0:
        return ""
    if info.word_count == 1:
        return "Perfect for vocabulary! Try selecting a phrase for dictation."
    if info.word_count <= 5:
        return "Great for phrases! Good for vocabulary and translation exercises."
    if info.word_count <= 15:
        return "Ideal for dictation and translation exercises!"
    if info.word_count <= 30:
        return "Good for dictation practice, but might be challenging."
    return "Selection is quite long. Consider shorter segments for better practice."


def clean_text_for_exercise(text: str, kind: ExerciseKind) -> str:
    """Prepare selected text for an exercise without disturbing inner spacing."""

    cleaned = text.strip()
    if kind == "vocabulary":
        cleaned = _VOCABULARY_PUNCTUATION.sub("", cleaned)
        cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    elif kind == "dictation" and cleaned:
        cleaned = cleaned[0].upper() + cleaned[1:]
        if len(cleaned) > 10 and cleaned[-1] not in ".!?":
            cleaned += "."
    return cleaned


def levenshtein_distance(first: str, second: str) -> int:
    if first == second:
        return 0
    if not first:
        return len(second)
    if not second:
        return len(first)

    previous = list(range(len(second) + 1))
    for i, left in enumerate(first, start=1):
        current = [i]
        for j, right in enumerate(second, start=1):
            cost = 0 if left == right else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def normalize_for_comparison(text: str) -> str:
    if not text:
        return ""
    normalized = text.strip().lower()
    normalized = _SINGLE_QUOTES.sub("'", normalized)
    normalized = _DOUBLE_QUOTES.sub('"', normalized)
    normalized = _DASHES.sub("-", normalized)
    normalized = _WHITESPACE.sub(" ", normalized)
    normalized = _COMPARE_PUNCTUATION.sub("", normalized)
    return normalized.strip()


def _token_similarity(first: str, second: str) -> float:
    left = set(_WHITESPACE.split(first))
    right = set(_WHITESPACE.split(second))
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


def string_similarity(first: str, second: str) -> float:
    """Weighted blend of edit-distance and token overlap in ``[0, 1]``."""

    if not first or not second:
        return 0.0
    left = first.lower().strip()
    right = second.lower().strip()
    if left == right:
        return 1.0
    edit = 1 - levenshtein_distance(left, right) / max(len(left), len(right))
    return edit * 0.6 + _token_similarity(left, right) * 0.4


@dataclass(slots=True)
class ComparisonResult:
    accuracy: int
    differences: list[str] = field(default_factory=list)


def compare_texts(expected: str, actual: str) -> ComparisonResult:
    """Score a dictation attempt against the expected text."""

    if not expected or not actual:
        return ComparisonResult(accuracy=0, differences=["Empty input"])

    left = normalize_for_comparison(expected)
    right = normalize_for_comparison(actual)
    if left == right:
        return ComparisonResult(accuracy=100)

    accuracy = round(string_similarity(left, right) * 100)
    expected_tokens = left.split(" ")
    actual_tokens = right.split(" ")
    differences: list[str] = []
    missing = [token for token in expected_tokens if token not in actual_tokens]
    if missing:
        differences.append(f"Missing words: {', '.join(missing)}")
    extra = [token for token in actual_tokens if token not in expected_tokens]
    if extra:
        differences.append(f"Extra words: {', '.join(extra)}")
    return ComparisonResult(accuracy=accuracy, differences=differences)


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    is_correct: bool
    accuracy: int
    feedback: str
    similarity_score: float
    category: AnswerCategory


def evaluate_answer(user_answer: str, correct_answer: str, threshold: float = 0.8) -> EvaluationResult:
    """Grade a cloze answer, accepting near misses above ``threshold``."""

    if not user_answer or not user_answer.strip():
        return EvaluationResult(False, 0, "No answer provided", 0.0, "incorrect")

    given = user_answer.lower().strip()
    expected = correct_answer.lower().strip()
    if given == expected:
        return EvaluationResult(True, 100, "Perfect match!", 1.0, "exact")

    longer = max(given, expected, key=len)
    shorter = expected if longer is given else given
    similarity = (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)

    if similarity >= threshold:
        return EvaluationResult(True, round(similarity * 100), "Close enough!", similarity, "close")
    return EvaluationResult(False, round(similarity * 100), "Not quite right", similarity, "incorrect")
