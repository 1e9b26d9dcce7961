import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
from uuid import uuid4

from docchat.api.deps.dependencies import get_ingestion_dispatcher, get_reindex_service
from docchat.api.main import create_app
from docchat.core.document_processing.models import IngestionOutcome, IngestionResult
from docchat.core.exceptions import DocumentNotFoundError
from docchat.models.ingestion import ReindexFailure, ReindexReport, ReindexScope


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


@pytest.fixture
def mock_dispatcher():
    return AsyncMock()


@pytest.fixture
def mock_reindex_service():
    return AsyncMock()


@pytest.fixture
def overridden(client, mock_dispatcher, mock_reindex_service):
    client.app.dependency_overrides[get_ingestion_dispatcher] = lambda: mock_dispatcher
    client.app.dependency_overrides[get_reindex_service] = lambda: mock_reindex_service
    return client


def test_ingest_single_document_returns_202(overridden, mock_dispatcher):
    doc_id = uuid4()
    mock_dispatcher.dispatch.return_value = IngestionResult(
        document_id=doc_id, status=IngestionOutcome.READY, chunk_count=4
    )

    response = overridden.post("/api/ingest", json={"docId": str(doc_id)})

    assert response.status_code == 202
    data = response.json()
    assert data["ok"] is True
    assert data["queued"] == [str(doc_id)]
    assert data["results"][0]["chunk_count"] == 4
    mock_dispatcher.dispatch.assert_called_once_with(doc_id)


def test_ingest_requires_doc_id_or_all(overridden, mock_dispatcher):
    response = overridden.post("/api/ingest", json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "docId is required"
    mock_dispatcher.dispatch.assert_not_called()


def test_ingest_unknown_document_returns_404(overridden, mock_dispatcher):
    doc_id = uuid4()
    mock_dispatcher.dispatch.side_effect = DocumentNotFoundError(doc_id)

    response = overridden.post("/api/ingest", json={"docId": str(doc_id)})

    assert response.status_code == 404


def test_ingest_all_reindexes_every_document(overridden, mock_reindex_service):
    ids = [uuid4(), uuid4()]
    mock_reindex_service.resolve_targets.return_value = ids
    mock_reindex_service.reindex.return_value = ReindexReport(ok=True, queued=2, succeeded=ids)

    response = overridden.post("/api/ingest", json={"all": True})

    assert response.status_code == 202
    assert response.json()["queued"] == [str(doc_id) for doc_id in ids]
    mock_reindex_service.resolve_targets.assert_called_once_with(ReindexScope.ALL)
    mock_reindex_service.reindex.assert_called_once_with(ids=ids)


def test_reindex_success_returns_200(overridden, mock_reindex_service):
    doc_id = uuid4()
    mock_reindex_service.reindex.return_value = ReindexReport(ok=True, queued=1, succeeded=[doc_id])

    response = overridden.post("/api/reindex", json={"scope": "all", "limit": 10})

    assert response.status_code == 200
    assert response.json()["succeeded"] == [str(doc_id)]
    mock_reindex_service.reindex.assert_called_once_with(scope=ReindexScope.ALL, ids=None, limit=10)


def test_reindex_partial_failure_returns_207(overridden, mock_reindex_service):
    good, bad = uuid4(), uuid4()
    mock_reindex_service.reindex.return_value = ReindexReport(
        ok=False,
        queued=2,
        succeeded=[good],
        failed=[ReindexFailure(doc_id=bad, error="No text could be extracted")],
    )

    response = overridden.post("/api/reindex", json={"ids": [str(good), str(bad)]})

    assert response.status_code == 207
    data = response.json()
    assert data["ok"] is False
    assert data["failed"][0]["doc_id"] == str(bad)


def test_reindex_rejects_non_positive_limit(overridden):
    response = overridden.post("/api/reindex", json={"limit": 0})
    assert response.status_code == 422
