"""Tests for shared input validation rules."""
from __future__ import annotations

from lwl.core.validation import (
    sanitize_input,
    validate_email,
    validate_feedback,
    validate_input,
    validate_url,
)


def test_validate_input_requires_text() -> None:
    result = validate_input("   ")

    assert result.is_valid is False
    assert result.error == "This field is required"


def test_validate_input_optional_blank_is_valid() -> None:
    assert validate_input("", required=False).is_valid is True


def test_validate_input_enforces_max_length() -> None:
    result = validate_input("a" * 1001)

    assert result.is_valid is False
    assert result.error == "Maximum length is 1000 characters"
    assert validate_input("a" * 20, max_length=20).is_valid is True


def test_validate_input_rejects_markup_unless_allowed() -> None:
    for text in ("<script>alert(1)</script>", "javascript:void(0)", '<img onerror="x">', "<iframe src=x>"):
        result = validate_input(text)
        assert result.is_valid is False
        assert result.error == "Invalid characters detected"

    assert validate_input("<b>bold</b> <script>", allow_html=True).is_valid is True


def test_sanitize_input_strips_scripts_and_handlers() -> None:
    cleaned = sanitize_input('  <p onclick="steal()">Hola</p><script>bad()</script>  ')

    assert "script" not in cleaned
    assert "onclick" not in cleaned
    assert "Hola" in cleaned
    assert cleaned == cleaned.strip()
    assert sanitize_input(None) == ""


def test_validate_email_and_url() -> None:
    assert validate_email("learner@example.com") is True
    assert validate_email("not-an-email") is False
    assert validate_email(None) is False

    assert validate_url("https://lwlnow.com/blog") is True
    assert validate_url("lwlnow.com") is False
    assert validate_url("") is False


def test_validate_feedback_rules_in_order() -> None:
    assert validate_feedback("Ana", "ana@example.com", "").error == "Message is required"
    assert (
        validate_feedback(None, None, "x" * 5001).error == "Message must be at most 5000 characters"
    )
    assert validate_feedback("n" * 101, None, "Great app").error == "Name must be at most 100 characters"
    assert validate_feedback("Ana", "bad-email", "Great app").error == "Please enter a valid email address"
    assert validate_feedback(None, None, "Great app").is_valid is True
