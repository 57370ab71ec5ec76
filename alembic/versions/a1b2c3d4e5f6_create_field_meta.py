"""create field_meta table

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "field_meta",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("object_type", sa.String(20), nullable=False, server_default="post"),
        sa.Column("object_id", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("meta_key", sa.String(255), nullable=False),
        sa.Column("meta_value", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("object_type", "object_id", "meta_key", name="uq_field_meta_object_key"),
    )
    op.create_index("ix_field_meta_id", "field_meta", ["id"])
    op.create_index("ix_field_meta_object", "field_meta", ["object_type", "object_id"])


def downgrade() -> None:
    op.drop_index("ix_field_meta_object", table_name="field_meta")
    op.drop_index("ix_field_meta_id", table_name="field_meta")
    op.drop_table("field_meta")
