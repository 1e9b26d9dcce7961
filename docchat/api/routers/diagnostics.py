"""
Diagnostics API endpoint.

Routes: GET /diag?q=

Dependencies: docchat.application.services
System role: Operational self-check HTTP API
"""

from fastapi import APIRouter, Depends, Query

from docchat.api.deps import get_diagnostics_service
from docchat.application.services.diagnostics_service import DiagnosticsService
from docchat.models.diagnostics import DiagnosticsReport

router = APIRouter(tags=["diagnostics"])


@router.get("/diag", response_model=DiagnosticsReport)
async def diagnostics(
    q: str | None = Query(default=None, description="Question for a retrieval dry run"),
    diagnostics_service: DiagnosticsService = Depends(get_diagnostics_service),
) -> DiagnosticsReport:
    """Run collaborator probes and an optional retrieval dry run."""
    return await diagnostics_service.run(q)
