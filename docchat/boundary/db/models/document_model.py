"""
Document ORM model.

Represents an uploaded file and its ingestion lifecycle.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from docchat.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document ingestion lifecycle states.

    UPLOADED: Bytes stored, ingestion not yet requested
    QUEUED: Ingestion requested (upload trigger or bulk reindex)
    PROCESSING: A run is extracting, chunking or embedding
    READY: Chunks of the current generation are searchable
    ERROR: Last run failed; `error` holds the reason
    """

    UPLOADED = "uploaded"
    QUEUED = "queued"
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion state.

    `generation` increments at the start of every ingestion run; chunk rows
    are stamped with the generation that wrote them and only rows matching
    the document's current generation are searchable. `stage` holds
    progress text while `error` holds failure text only.

    Attributes:
        id: UUID primary key
        filename: Original file name
        mime_type: Declared content type
        size_bytes: Upload size
        storage_path: Object store key
        status: Lifecycle state
        error: Failure message of the last run
        stage: Progress message of the current or last run
        original_text_len: Extracted text length of the last successful run
        generation: Current ingestion run number
        checkpoint_offset: Next chunk offset of a resumable run
        checkpoint_total: Chunk total of a resumable run
    """

    __tablename__ = "documents"

    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="application/octet-stream",
    )
    size_bytes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    storage_path: Mapped[str] = mapped_column(String(1024), nullable=False)

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(
            DocumentStatus,
            native_enum=False,
            length=32,
            values_callable=lambda statuses: [status.value for status in statuses],
        ),
        nullable=False,
        default=DocumentStatus.UPLOADED,
    )
    error: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    stage: Mapped[str | None] = mapped_column(String(255), nullable=True)
    original_text_len: Mapped[int | None] = mapped_column(Integer, nullable=True)

    generation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    checkpoint_offset: Mapped[int | None] = mapped_column(Integer, nullable=True)
    checkpoint_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
