"""Storage bucket registry."""
import uuid

from sqlalchemy import BigInteger, Boolean, Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from lwl.db.base import Base
from lwl.db.types import StringList


class StorageBucket(Base):
    __tablename__ = "storage_buckets"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(63), unique=True, nullable=False)
    public = Column(Boolean, nullable=False, default=False)
    file_size_limit = Column(BigInteger, nullable=True)
    allowed_mime_types = Column(StringList, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
