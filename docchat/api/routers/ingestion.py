"""
Ingestion API endpoints.

Routes:
- POST /ingest - Ingest one document ({docId}) or all documents ({all: true})
- POST /reindex - Bulk re-index with bounded concurrency

Dependencies: docchat.application.services, docchat.models
System role: Ingestion HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from docchat.api.deps import get_ingestion_dispatcher, get_reindex_service
from docchat.application.services.ingestion_dispatcher import IngestionDispatcher
from docchat.application.services.reindex_service import ReindexService
from docchat.core.exceptions import DocumentNotFoundError
from docchat.models.ingestion import (
    IngestRequest,
    IngestResponse,
    ReindexReport,
    ReindexRequest,
    ReindexScope,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ingestion"])


@router.post("/ingest", response_model=IngestResponse, status_code=202)
async def ingest(
    request: IngestRequest,
    dispatcher: IngestionDispatcher = Depends(get_ingestion_dispatcher),
    reindex_service: ReindexService = Depends(get_reindex_service),
) -> IngestResponse:
    """
    Trigger ingestion.

    Args:
        request: docId, or all=true
        dispatcher: Injected IngestionDispatcher
        reindex_service: Injected ReindexService (for all=true)

    Returns:
        IngestResponse: Documents handed over and their outcomes

    Raises:
        HTTPException(400): Neither docId nor all given
        HTTPException(404): Unknown docId
    """
    if request.doc_id is None and not request.all:
        raise HTTPException(status_code=400, detail="docId is required")

    if request.doc_id is not None:
        try:
            result = await dispatcher.dispatch(request.doc_id)
        except DocumentNotFoundError:
            raise HTTPException(status_code=404, detail="document not found")
        return IngestResponse(ok=result.ok, queued=[request.doc_id], results=[result])

    targets = await reindex_service.resolve_targets(ReindexScope.ALL)
    report = await reindex_service.reindex(ids=targets)
    return IngestResponse(ok=report.ok, queued=targets)


@router.post("/reindex", response_model=ReindexReport)
async def reindex(
    request: ReindexRequest,
    reindex_service: ReindexService = Depends(get_reindex_service),
):
    """
    Re-index documents by scope or explicit ids.

    Returns:
        ReindexReport: 200 when all succeeded, 207 when any failed
    """
    report = await reindex_service.reindex(scope=request.scope, ids=request.ids, limit=request.limit)
    if not report.ok:
        return JSONResponse(status_code=207, content=report.model_dump(mode="json"))
    return report
