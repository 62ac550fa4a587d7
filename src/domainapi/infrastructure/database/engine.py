"""SQLite engine setup and the SQL-backed Domain Store.

WAL mode keeps readers unblocked while documents are rewritten.
SQLAlchemy Core (not ORM): documents are opaque JSON bodies.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, delete, event, insert, select
from sqlalchemy.engine import Engine

from domainapi.domain.model import DocumentKey
from domainapi.infrastructure.database.schema import documents, metadata
from domainapi.infrastructure.store import decode_document


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(db_path: Path) -> Engine:
    """Create the database file and tables at *db_path*.

    Idempotent, safe to call on an existing database.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine


class SqlDomainStore:
    """Domain Store over the ``documents`` table.

    Local SQLite calls are short, so they run inline in the coroutine.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    async def read(self, key: DocumentKey) -> dict[str, Any] | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(documents.c.body).where(
                    documents.c.type == key.type, documents.c.id == key.id
                )
            ).first()
        if row is None:
            return None
        return decode_document(key, row.body)

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> None:
        body = json.dumps(document, separators=(",", ":"), sort_keys=True)
        with self._engine.begin() as conn:
            conn.execute(
                delete(documents).where(documents.c.type == key.type, documents.c.id == key.id)
            )
            conn.execute(
                insert(documents).values(
                    type=key.type,
                    id=key.id,
                    body=body,
                    modified=datetime.now(UTC).isoformat(),
                )
            )

    def close(self) -> None:
        self._engine.dispose()
