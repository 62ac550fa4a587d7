"""SQLAlchemy Core table definitions for the document store."""

from __future__ import annotations

from sqlalchemy import Column, MetaData, PrimaryKeyConstraint, Table, Text

metadata = MetaData()

documents = Table(
    "documents",
    metadata,
    Column("type", Text, nullable=False),
    Column("id", Text, nullable=False),
    Column("body", Text, nullable=False),  # JSON object
    Column("modified", Text, nullable=False),
    PrimaryKeyConstraint("type", "id"),
)
