"""create directory table

Create the key-value table holding user directory records. Each row keeps
the record's uuid as primary key and the full record as a JSONB document.
The table name comes from BOTNORREA_DIRECTORY_TABLE_NAME.

Revision ID: 3c9d2a41b7e0
Revises:
Create Date: 2026-10-19 10:12:44.318207

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

from infrastructure.settings import get_directory_settings


# revision identifiers, used by Alembic.
revision: str = "3c9d2a41b7e0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    table_name = get_directory_settings().table_name
    op.create_table(
        table_name,
        sa.Column("uuid", sa.String(length=36), nullable=False),
        sa.Column("item", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.PrimaryKeyConstraint("uuid", name=op.f(f"pk_{table_name}")),
    )
    # Lookup by external id scans with JSONB containment
    op.create_index(
        op.f(f"ix_{table_name}_item"),
        table_name,
        ["item"],
        postgresql_using="gin",
        postgresql_ops={"item": "jsonb_path_ops"},
    )


def downgrade() -> None:
    """Downgrade schema."""
    table_name = get_directory_settings().table_name
    op.drop_index(op.f(f"ix_{table_name}_item"), table_name=table_name)
    op.drop_table(table_name)
