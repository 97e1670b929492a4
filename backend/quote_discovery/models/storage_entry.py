"""StorageEntry ORM: namespaced key-value blobs backing the engine's persistence port.

Invariants:
    - (namespace, key) is unique: one blob per session per key
    - value is the raw JSON text handed over by the engine, never parsed here
    - updated_at is refreshed on every write

Design Decisions:
    - Generic blob table over one table per record type: the engine owns the
      shapes, storage only moves text
    - namespace = session id: sessions never see each other's history
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from quote_discovery.db.base import Base


class StorageEntry(Base):
    """One persisted blob (history, saved searches or analytics) for a session."""
    __tablename__ = "storage_entries"

    namespace: Mapped[str] = mapped_column(String(100), primary_key=True)
    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
