"""SQLite-backed Domain Store (SQLAlchemy Core)."""

from domainapi.infrastructure.database.engine import SqlDomainStore, create_db_engine, init_database

__all__ = ["SqlDomainStore", "create_db_engine", "init_database"]
