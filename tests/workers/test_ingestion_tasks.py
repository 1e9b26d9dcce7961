"""
Test suite for the Celery ingestion tasks.

Tasks are called directly (no broker); the orchestrator and engine are
replaced with mocks.

System role: Verification of task wiring and continuation scheduling
"""

import asyncio
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docchat.core.document_processing.models import IngestionCheckpoint, IngestionOutcome, IngestionResult
from docchat.workers import celery_app
from docchat.workers.tasks import document_ingestion
from docchat.workers.tasks.document_ingestion import (
    CeleryContinuationScheduler,
    continue_document_ingestion,
    ingest_document,
)


def _orchestrator(document_id: uuid.UUID, status=IngestionOutcome.READY) -> MagicMock:
    result = IngestionResult(document_id=document_id, status=status, chunk_count=2)
    orchestrator = MagicMock()
    orchestrator.ingest = AsyncMock(return_value=result)
    orchestrator.start_resumable = AsyncMock(return_value=result)
    orchestrator.continue_ingestion = AsyncMock(return_value=result)
    return orchestrator


class TestCeleryApp:
    def test_tasks_should_be_registered_by_name(self) -> None:
        assert ingest_document.name == "docchat.ingest_document"
        assert continue_document_ingestion.name == "docchat.continue_document_ingestion"
        assert "docchat.ingest_document" in celery_app.tasks

    def test_should_use_json_serialization(self) -> None:
        assert celery_app.conf.task_serializer == "json"
        assert celery_app.conf.accept_content == ["json"]


class TestIngestDocumentTask:
    """Test suite for ingest_document."""

    def test_should_run_full_ingestion_by_default(self) -> None:
        document_id = uuid.uuid4()
        orchestrator = _orchestrator(document_id)

        with patch.object(document_ingestion.builders, "build_ingestion_orchestrator", return_value=orchestrator), \
                patch.object(document_ingestion.builders, "build_object_store"), \
                patch.object(document_ingestion.builders, "build_embedding_gateway"), \
                patch.object(document_ingestion, "create_task_engine") as create_engine:
            create_engine.return_value.dispose = AsyncMock()
            result = ingest_document(str(document_id))

        assert result["status"] == "ready"
        assert result["document_id"] == str(document_id)
        orchestrator.ingest.assert_awaited_once_with(document_id)
        orchestrator.start_resumable.assert_not_called()
        create_engine.return_value.dispose.assert_awaited_once()

    def test_resumable_setting_should_start_first_window(self) -> None:
        document_id = uuid.uuid4()
        orchestrator = _orchestrator(document_id, IngestionOutcome.CONTINUING)
        settings = MagicMock()
        settings.ingestion.resumable = True

        with patch.object(document_ingestion, "get_settings", return_value=settings), \
                patch.object(document_ingestion, "_run", new=lambda operation: operation(orchestrator)):
            ingest_document(str(document_id))

        orchestrator.start_resumable.assert_awaited_once_with(document_id)
        orchestrator.ingest.assert_not_called()

    def test_engine_should_be_disposed_when_run_fails(self) -> None:
        orchestrator = MagicMock()
        orchestrator.ingest = AsyncMock(side_effect=RuntimeError("boom"))

        with patch.object(document_ingestion.builders, "build_ingestion_orchestrator", return_value=orchestrator), \
                patch.object(document_ingestion.builders, "build_object_store"), \
                patch.object(document_ingestion.builders, "build_embedding_gateway"), \
                patch.object(document_ingestion, "create_task_engine") as create_engine:
            create_engine.return_value.dispose = AsyncMock()
            with pytest.raises(RuntimeError):
                ingest_document(str(uuid.uuid4()))

        create_engine.return_value.dispose.assert_awaited_once()


class TestContinuationTask:
    """Test suite for continue_document_ingestion and its scheduler."""

    def test_should_parse_checkpoint_and_continue(self) -> None:
        document_id = uuid.uuid4()
        orchestrator = _orchestrator(document_id)
        checkpoint = IngestionCheckpoint(document_id=document_id, generation=3, next_offset=4, total_chunks=9)

        with patch.object(document_ingestion, "_run", new=lambda operation: operation(orchestrator)):
            result = continue_document_ingestion(checkpoint.model_dump(mode="json"))

        assert result == orchestrator.continue_ingestion.return_value
        orchestrator.continue_ingestion.assert_awaited_once_with(checkpoint)

    def test_scheduler_should_enqueue_serialized_checkpoint(self) -> None:
        checkpoint = IngestionCheckpoint(document_id=uuid.uuid4(), generation=1, next_offset=2, total_chunks=5)

        with patch.object(continue_document_ingestion, "delay") as delay:
            asyncio.run(CeleryContinuationScheduler().schedule(checkpoint))

        delay.assert_called_once_with(checkpoint.model_dump(mode="json"))
