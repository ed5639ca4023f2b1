from __future__ import annotations

import uuid
from collections.abc import Generator

from sqlalchemy import Column, DateTime, create_engine, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from portal.common.time import utcnow
from portal.config import get_settings


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    # SQLite leaves foreign keys (and so ON DELETE CASCADE) off unless enabled per connection.
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False}, future=True)
        enable_sqlite_foreign_keys(engine)
        return engine
    return create_engine(url, pool_pre_ping=True, future=True)


settings = get_settings()

engine = build_engine(settings.sqlalchemy_database_uri())

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)

Base = declarative_base()


class UuidPrimaryKeyMixin:
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)


class UpdatedAtMixin:
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class TimestampMixin(UpdatedAtMixin):
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
