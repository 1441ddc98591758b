"""Local bucket storage tests."""
from __future__ import annotations

import pytest

from lwl.services.storage import AUDIO_BUCKET, StorageService
from lwl.utils.exceptions import NotFoundError, ValidationError


@pytest.fixture()
def storage(db_session, tmp_path) -> StorageService:
    return StorageService(db_session, root=tmp_path)


def test_ensure_bucket_is_idempotent(storage: StorageService, tmp_path) -> None:
    bucket, created = storage.ensure_bucket()
    again, created_again = storage.ensure_bucket()

    assert created is True
    assert created_again is False
    assert again.id == bucket.id
    assert bucket.allowed_mime_types == ["audio/mpeg", "audio/mp3"]
    assert (tmp_path / AUDIO_BUCKET).is_dir()


def test_invalid_bucket_name(storage: StorageService) -> None:
    with pytest.raises(ValidationError):
        storage.ensure_bucket("../etc")


def test_store_object_enforces_bucket_rules(storage: StorageService, tmp_path) -> None:
    storage.ensure_bucket(file_size_limit=10)

    path = storage.store_object(AUDIO_BUCKET, "clip.mp3", b"12345", "audio/mpeg")
    assert path == tmp_path / AUDIO_BUCKET / "clip.mp3"
    assert path.read_bytes() == b"12345"

    with pytest.raises(ValidationError):
        storage.store_object(AUDIO_BUCKET, "big.mp3", b"x" * 11, "audio/mpeg")
    with pytest.raises(ValidationError):
        storage.store_object(AUDIO_BUCKET, "clip.wav", b"1", "audio/wav")
    with pytest.raises(ValidationError):
        storage.store_object(AUDIO_BUCKET, "../escape.mp3", b"1", "audio/mpeg")
    with pytest.raises(NotFoundError):
        storage.store_object("missing", "clip.mp3", b"1", "audio/mpeg")


def test_public_url(storage: StorageService, monkeypatch) -> None:
    from lwl.config import settings

    monkeypatch.setattr(settings, "SITE_URL", "https://example.com/")

    assert storage.public_url(AUDIO_BUCKET, "clip.mp3") == "https://example.com/storage/audio/clip.mp3"
