"""
Document API endpoints.

Routes:
- POST /upload - Store files and trigger ingestion
- GET /doc-status?docId= - Document state and chunk count
- GET /list-docs - Document ids, newest first

Dependencies: docchat.application.services, docchat.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from docchat.api.deps import get_document_service, get_ingestion_dispatcher
from docchat.application.services.document_service import DocumentService
from docchat.application.services.ingestion_dispatcher import IngestionDispatcher
from docchat.core.exceptions import DocChatException, DocumentNotFoundError
from docchat.models.document import DocumentListResponse, DocumentStatusResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


@router.post("/upload", response_model=UploadResponse)
async def upload_documents(
    files: list[UploadFile] | None = File(default=None, description="One or more files"),
    document_service: DocumentService = Depends(get_document_service),
    dispatcher: IngestionDispatcher = Depends(get_ingestion_dispatcher),
) -> UploadResponse:
    """
    Upload files and ingest each one.

    Each file is stored, recorded with status uploaded and handed to the
    ingestion dispatcher. Failures are reported per file.

    Args:
        files: Multipart `files` field
        document_service: Injected DocumentService
        dispatcher: Injected IngestionDispatcher

    Returns:
        UploadResponse: Per-file results; ok when every ingest succeeded

    Raises:
        HTTPException(400): No files provided
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files provided")

    results = []
    for upload in files:
        data = await upload.read()
        entry = await document_service.upload(upload.filename or "file", upload.content_type, data)
        if entry.doc_id is not None:
            try:
                entry.ingest = await dispatcher.dispatch(entry.doc_id)
            except DocChatException as e:
                entry.error = f"ingest: {e.message}"
            except Exception as e:
                logger.exception("Ingestion dispatch failed", extra={"document_id": str(entry.doc_id)})
                entry.error = f"ingest: {type(e).__name__}: {e}"
        results.append(entry)

    return UploadResponse(ok=all(entry.ok for entry in results), results=results)


@router.get("/doc-status", response_model=DocumentStatusResponse)
async def document_status(
    doc_id: UUID | None = Query(default=None, alias="docId"),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentStatusResponse:
    """
    Get a document's status and chunk count.

    Raises:
        HTTPException(400): docId missing
        HTTPException(404): Document not found
    """
    if doc_id is None:
        raise HTTPException(status_code=400, detail="docId required")
    try:
        return await document_service.get_status(doc_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="document not found")


@router.get("/list-docs", response_model=DocumentListResponse)
async def list_documents(
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List document ids, newest first."""
    return DocumentListResponse(ids=await document_service.list_ids())
