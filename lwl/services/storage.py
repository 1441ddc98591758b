"""Local bucket storage for generated audio."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from lwl.config import settings
from lwl.db.models.storage import StorageBucket
from lwl.utils.exceptions import NotFoundError, ValidationError

AUDIO_BUCKET = "audio"
AUDIO_SIZE_LIMIT = 5 * 1024 * 1024
AUDIO_MIME_TYPES = ("audio/mpeg", "audio/mp3")

_BUCKET_NAME = re.compile(r"^[a-z0-9][a-z0-9_-]{1,62}$")
_SAFE_FILENAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class StorageService:
    def __init__(self, db: Session, root: Optional[Path] = None):
        self.db = db
        self.root = Path(root or settings.STORAGE_ROOT)

    def bucket_path(self, name: str) -> Path:
        return self.root / name

    def ensure_bucket(
        self,
        name: str = AUDIO_BUCKET,
        *,
        public: bool = True,
        file_size_limit: int = AUDIO_SIZE_LIMIT,
        allowed_mime_types: Sequence[str] = AUDIO_MIME_TYPES,
    ) -> tuple[StorageBucket, bool]:
        """Create the bucket if missing; returns the bucket and whether it was created."""

        if not _BUCKET_NAME.match(name):
            raise ValidationError("Invalid bucket name")
        bucket = self.db.scalar(select(StorageBucket).where(StorageBucket.name == name))
        created = bucket is None
        if created:
            bucket = StorageBucket(
                name=name,
                public=public,
                file_size_limit=file_size_limit,
                allowed_mime_types=list(allowed_mime_types),
            )
            self.db.add(bucket)
            self.db.commit()
            self.db.refresh(bucket)
            logger.info("Storage bucket created", bucket=name)
        self.bucket_path(name).mkdir(parents=True, exist_ok=True)
        return bucket, created

    def store_object(self, bucket_name: str, filename: str, data: bytes, mime_type: str) -> Path:
        bucket = self.db.scalar(select(StorageBucket).where(StorageBucket.name == bucket_name))
        if bucket is None:
            raise NotFoundError(f"Bucket {bucket_name} not found")
        if not _SAFE_FILENAME.match(filename):
            raise ValidationError("Invalid file name")
        if bucket.file_size_limit is not None and len(data) > bucket.file_size_limit:
            raise ValidationError("File exceeds the bucket size limit")
        if bucket.allowed_mime_types and mime_type not in bucket.allowed_mime_types:
            raise ValidationError(f"MIME type {mime_type} is not allowed")

        path = self.bucket_path(bucket_name)
        path.mkdir(parents=True, exist_ok=True)
        target = path / filename
        target.write_bytes(data)
        logger.debug("Object stored", bucket=bucket_name, filename=filename, size=len(data))
        return target

    def public_url(self, bucket_name: str, filename: str) -> str:
        return f"{settings.SITE_URL.rstrip('/')}/storage/{bucket_name}/{filename}"
