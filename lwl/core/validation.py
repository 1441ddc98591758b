"""Input validation rules shared by the API and services."""
from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DANGEROUS_PATTERNS = (
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<iframe", re.IGNORECASE),
    re.compile(r"<object", re.IGNORECASE),
    re.compile(r"<embed", re.IGNORECASE),
)

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)

DEFAULT_MAX_LENGTH = 1000
FEEDBACK_MESSAGE_MAX_LENGTH = 5000
FEEDBACK_NAME_MAX_LENGTH = 100


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    error: str | None = None


def validate_input(
    text: str | None,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    allow_html: bool = False,
    required: bool = True,
) -> ValidationResult:
    """Check presence, length and markup of free-text input."""

    if required and (not text or not text.strip()):
        return ValidationResult(False, "This field is required")
    if text and len(text) > max_length:
        return ValidationResult(False, f"Maximum length is {max_length} characters")
    if text and not allow_html:
        for pattern in DANGEROUS_PATTERNS:
            if pattern.search(text):
                return ValidationResult(False, "Invalid characters detected")
    return ValidationResult(True)


def sanitize_input(text: str | None) -> str:
    """Strip script blocks, ``javascript:`` URLs and inline event handlers."""

    if not text:
        return ""
    cleaned = _SCRIPT_BLOCK.sub("", text)
    cleaned = _JS_SCHEME.sub("", cleaned)
    cleaned = _EVENT_HANDLER.sub("", cleaned)
    return cleaned.strip()


def validate_email(email: str | None) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def validate_url(url: str | None) -> bool:
    if not url:
        return False
    parsed = urlparse(url)
    return bool(parsed.scheme) and bool(parsed.netloc)


def validate_feedback(name: str | None, email: str | None, message: str | None) -> ValidationResult:
    """Validate the feedback form; the first failing rule wins."""

    if not message or not message.strip():
        return ValidationResult(False, "Message is required")
    if len(message) > FEEDBACK_MESSAGE_MAX_LENGTH:
        return ValidationResult(
            False, f"Message must be at most {FEEDBACK_MESSAGE_MAX_LENGTH} characters"
        )
    if name and len(name) > FEEDBACK_NAME_MAX_LENGTH:
        return ValidationResult(False, f"Name must be at most {FEEDBACK_NAME_MAX_LENGTH} characters")
    if email and not validate_email(email):
        return ValidationResult(False, "Please enter a valid email address")
    return ValidationResult(True)
