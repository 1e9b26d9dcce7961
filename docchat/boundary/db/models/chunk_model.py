"""
Chunk ORM model.

One embedded window of a document's text. Rows are written in batches by
an ingestion run and deleted wholesale; they are never updated.

Dependencies: sqlalchemy, pgvector
System role: Searchable chunk storage
"""

import uuid
from datetime import datetime

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from docchat.boundary.db.base import Base, utc_now

# pgvector on PostgreSQL, a JSON list on SQLite.
EmbeddingType = Vector().with_variant(JSON(none_as_null=True), "sqlite")


class ChunkModel(Base):
    """
    Chunk ORM model.

    Attributes:
        id: Surrogate integer key
        document_id: Owning document (cascade delete)
        chunk_index: Dense zero-based position within the run
        content: Chunk text
        embedding: Embedding vector
        generation: Ingestion run that wrote the row
        created_at: Insert timestamp (UTC)
    """

    __tablename__ = "chunks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float] | None] = mapped_column(EmbeddingType, nullable=True)
    generation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_chunks_document_generation", "document_id", "generation", "chunk_index"),
    )
