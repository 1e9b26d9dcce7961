"""
Document service.

Upload (object store + document row), status lookup and listing.

Dependencies: sqlalchemy, docchat.boundary.db, docchat.core.ports
System role: Document management for the HTTP layer
"""

import logging
import re
import unicodedata
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.chunk_crud import chunk_crud
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.models.document_model import DocumentModel, DocumentStatus
from docchat.core.exceptions import DocumentNotFoundError, StorageError
from docchat.core.ports import ObjectStore
from docchat.models.document import DocumentStatusResponse, DocumentView, UploadedFile

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
MAX_SAFE_FILENAME_LENGTH = 140

_UNSAFE_CHARS = re.compile(r"[^\w.\- ]+")
_WHITESPACE = re.compile(r"\s+")


def sanitize_filename(name: str | None) -> str:
    """
    Make a file name safe for use in an object key.

    NFKC-normalizes, replaces anything outside word characters, dots,
    dashes and spaces with "_", then whitespace runs with "_", and keeps
    the first 140 characters.
    """
    base = unicodedata.normalize("NFKC", name or "file")
    base = _UNSAFE_CHARS.sub("_", base)
    base = _WHITESPACE.sub("_", base)
    return base[:MAX_SAFE_FILENAME_LENGTH]


def to_view(document: DocumentModel) -> DocumentView:
    return DocumentView(
        id=document.id,
        filename=document.filename,
        mime_type=document.mime_type,
        size_bytes=document.size_bytes,
        status=DocumentStatus(document.status).value,
        stage=document.stage,
        error=document.error,
        original_text_len=document.original_text_len,
        created_at=document.created_at,
    )


class DocumentService:
    """Store uploads and report document state."""

    def __init__(self, db: AsyncSession, object_store: ObjectStore) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            object_store: Storage for uploaded bytes
        """
        self.db = db
        self.object_store = object_store

    async def upload(
        self,
        filename: str,
        content_type: str | None,
        data: bytes,
    ) -> UploadedFile:
        """
        Store one file and create its document row with status UPLOADED.

        Storage and database failures are reported on the returned entry
        rather than raised, so one bad file does not abort a batch.

        Args:
            filename: Original file name
            content_type: Declared MIME type
            data: File bytes

        Returns:
            UploadedFile: doc_id and storage_path on success, error otherwise
        """
        content_type = content_type or DEFAULT_CONTENT_TYPE
        entry = UploadedFile(name=filename, size=len(data), type=content_type)

        doc_id = uuid4()
        storage_path = f"{doc_id}__{sanitize_filename(filename)}"

        try:
            await self.object_store.put(storage_path, data, content_type)
        except StorageError as e:
            logger.warning(
                "Storage upload failed",
                extra={"file_name": filename, "error": e.message},
            )
            entry.error = f"storage upload: {e.message}"
            return entry
        entry.storage_path = storage_path

        try:
            await document_crud.create(
                self.db,
                id=doc_id,
                filename=filename,
                mime_type=content_type,
                size_bytes=len(data),
                storage_path=storage_path,
                status=DocumentStatus.UPLOADED,
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.exception(
                "Failed to insert document",
                extra={"file_name": filename, "storage_path": storage_path},
            )
            entry.error = f"insert document: {e}"
            return entry

        entry.doc_id = doc_id
        logger.info(
            "Document uploaded",
            extra={"document_id": str(doc_id), "file_name": filename, "size_bytes": len(data)},
        )
        return entry

    async def get_status(self, doc_id: UUID) -> DocumentStatusResponse:
        """
        Return a document and its searchable chunk count.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        document = await document_crud.get_by_id(self.db, doc_id)
        if document is None:
            raise DocumentNotFoundError(doc_id)
        chunks = await chunk_crud.count_current(self.db, doc_id)
        return DocumentStatusResponse(doc=to_view(document), chunks=chunks)

    async def list_ids(self) -> list[UUID]:
        """Return every document id, newest first."""
        return await document_crud.list_ids(self.db)
