"""Table definition for directory records.

Each row holds one directory item: the uuid key plus the whole item as a
JSONB document, so the table behaves as a key-value store.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, String, Table
from sqlalchemy.dialects.postgresql import JSONB

from infrastructure.database.models import new_metadata

KEY_COLUMN = "uuid"
ITEM_COLUMN = "item"


def build_directory_table(name: str, metadata: MetaData | None = None) -> Table:
    """Build the Core table for a directory table name.

    Args:
        name: Table name from configuration
        metadata: MetaData to register the table in (a fresh one by default)

    Returns:
        Table with uuid primary key and JSONB item columns
    """
    return Table(
        name,
        metadata if metadata is not None else new_metadata(),
        Column(KEY_COLUMN, String(36), primary_key=True),
        Column(ITEM_COLUMN, JSONB, nullable=False),
    )
