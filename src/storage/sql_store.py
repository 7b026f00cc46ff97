"""
SQLAlchemy-backed offline storage.

One row per (learner, key). Values are stored as JSON so both the gating id
list and bounded scores fit the same table.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from loguru import logger
from sqlalchemy import JSON, Float, String, UniqueConstraint, create_engine, delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from src.storage.base import BufferedStorage, StorageError, StoredValue


class Base(DeclarativeBase):
    pass


class OfflineStorageEntry(Base):
    """A single persisted key for a learner."""

    __tablename__ = "offline_storage"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    learner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    minimum: Mapped[float | None] = mapped_column(Float)
    maximum: Mapped[float | None] = mapped_column(Float)
    updated_at: Mapped[datetime] = mapped_column(default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint("learner_id", "key", name="uq_learner_key"),)

    def __repr__(self) -> str:
        return f"<OfflineStorageEntry learner={self.learner_id} key={self.key}>"


def _ensure_sqlite_directory(url: str) -> None:
    """Create the parent directory of a file-based sqlite database."""
    prefix = "sqlite:///"
    if url.startswith(prefix) and url != f"{prefix}:memory:":
        Path(url[len(prefix):]).expanduser().parent.mkdir(parents=True, exist_ok=True)


class SqlOfflineStorage(BufferedStorage):
    """Offline storage persisted through SQLAlchemy."""

    def __init__(self, url: str | None = None, learner_id: str = "default", engine: Engine | None = None):
        super().__init__()
        try:
            if engine is None:
                if url is None:
                    raise ValueError("SqlOfflineStorage needs a url or an engine")
                _ensure_sqlite_directory(url)
                engine = create_engine(url, pool_pre_ping=True)
            Base.metadata.create_all(bind=engine)
        except (SQLAlchemyError, ValueError, OSError) as e:
            raise StorageError(f"Cannot open offline storage {url or engine}: {e}") from e
        self.engine = engine
        self.learner_id = learner_id
        self._session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Offline storage transaction failed: {e}") from e
        finally:
            session.close()

    def _load(self) -> dict[str, StoredValue]:
        with self.session_scope() as session:
            rows = session.scalars(
                select(OfflineStorageEntry).where(OfflineStorageEntry.learner_id == self.learner_id)
            ).all()
            return {
                row.key: StoredValue(row.value, row.minimum, row.maximum)
                for row in rows
            }

    def _flush(self, entries: dict[str, StoredValue]) -> None:
        with self.session_scope() as session:
            existing = {
                row.key: row
                for row in session.scalars(
                    select(OfflineStorageEntry).where(
                        OfflineStorageEntry.learner_id == self.learner_id,
                        OfflineStorageEntry.key.in_(list(entries)),
                    )
                )
            }
            for key, entry in entries.items():
                row = existing.get(key)
                if row is None:
                    row = OfflineStorageEntry(learner_id=self.learner_id, key=key)
                    session.add(row)
                row.value = entry.value
                row.minimum = entry.minimum
                row.maximum = entry.maximum

        logger.debug(f"Saved {sorted(entries)} for {self.learner_id}")

    def _clear(self) -> None:
        with self.session_scope() as session:
            session.execute(
                delete(OfflineStorageEntry).where(OfflineStorageEntry.learner_id == self.learner_id)
            )
