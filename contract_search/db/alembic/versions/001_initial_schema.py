"""Create document and chunk tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

1. document: one row per uploaded file (metadata only, no content)
2. chunk: fixed-size text slices, FK to document with ON DELETE CASCADE
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

json_type = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create document and chunk tables."""
    op.create_table(
        "document",
        sa.Column("doc_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("filename", sa.Text(), nullable=False),
        sa.Column("contract_name", sa.Text(), nullable=False),
        sa.Column("parties", sa.Text(), nullable=True),
        sa.Column(
            "uploaded_on",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("expiry_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="Active"),
        sa.Column("risk_score", sa.Text(), nullable=False, server_default="Low"),
        sa.Column("file_size", sa.BigInteger(), nullable=True),
        sa.Column("file_type", sa.Text(), nullable=True),
    )
    op.create_index("idx_document_user_uploaded", "document", ["user_id", "uploaded_on"])

    op.create_table(
        "chunk",
        sa.Column("chunk_id", sa.Uuid(), primary_key=True),
        sa.Column("doc_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("text_chunk", sa.Text(), nullable=False),
        sa.Column("chunk_index", sa.Integer(), nullable=False),
        sa.Column("page_number", sa.Integer(), nullable=True),
        sa.Column("embedding", json_type, nullable=True),
        sa.Column("metadata", json_type, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["doc_id"], ["document.doc_id"], ondelete="CASCADE"),
    )
    op.create_index("idx_chunk_doc_index", "chunk", ["doc_id", "chunk_index"])
    op.create_index("idx_chunk_user", "chunk", ["user_id"])


def downgrade() -> None:
    """Drop chunk and document tables."""
    op.drop_index("idx_chunk_user", table_name="chunk")
    op.drop_index("idx_chunk_doc_index", table_name="chunk")
    op.drop_table("chunk")

    op.drop_index("idx_document_user_uploaded", table_name="document")
    op.drop_table("document")
