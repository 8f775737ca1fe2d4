"""SQLAlchemy metadata shared by table definitions.

Directory tables are built with SQLAlchemy Core because their names come
from configuration at runtime.
"""

from __future__ import annotations

from sqlalchemy import MetaData

# Deterministic constraint names for migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def new_metadata() -> MetaData:
    """Create a MetaData collection using the project naming convention."""
    return MetaData(naming_convention=NAMING_CONVENTION)
