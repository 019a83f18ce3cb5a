"""create draw list and draw history tables

Revision ID: 0001_create_draw_tables
Revises:
Create Date: 2026-10-18 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001_create_draw_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID_TYPE = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "draw_lists",
        sa.Column("id", ID_TYPE, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column(
            "is_favorite", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("used_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_draw_lists")),
    )
    op.create_table(
        "draw_history",
        sa.Column("id", ID_TYPE, autoincrement=True, nullable=False),
        sa.Column("kind", sa.String(length=20), nullable=False),
        sa.Column("input_data", sa.JSON(), nullable=False),
        sa.Column("result", sa.JSON(), nullable=False),
        sa.Column("proof", sa.JSON(), nullable=False),
        sa.Column("proof_hash", sa.String(length=8), nullable=False),
        sa.Column("verification_code", sa.String(length=9), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.Column("list_id", ID_TYPE, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["list_id"],
            ["draw_lists.id"],
            name=op.f("fk_draw_history_list_id_draw_lists"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_draw_history")),
    )
    op.create_index(
        op.f("ix_draw_history_proof_hash"), "draw_history", ["proof_hash"], unique=False
    )
    op.create_index(
        op.f("ix_draw_history_verification_code"),
        "draw_history",
        ["verification_code"],
        unique=False,
    )
    op.create_index(
        "ix_draw_history_created_at", "draw_history", ["created_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_draw_history_created_at", table_name="draw_history")
    op.drop_index(op.f("ix_draw_history_verification_code"), table_name="draw_history")
    op.drop_index(op.f("ix_draw_history_proof_hash"), table_name="draw_history")
    op.drop_table("draw_history")
    op.drop_table("draw_lists")
