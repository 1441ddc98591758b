"""Spaced repetition scheduling rules."""
