"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite engine and session factory, document factory,
fake collaborators
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from docchat.boundary.db.base import Base
from docchat.boundary.db.models.document_model import DocumentModel, DocumentStatus
from fakes import InMemoryObjectStore, LetterCountEmbeddings, RecordingScheduler


@pytest.fixture
async def db_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine sharing one connection across sessions
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Provide a single async session for CRUD tests.

    Yields:
        AsyncSession: Session rolled back after the test
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def embeddings() -> LetterCountEmbeddings:
    return LetterCountEmbeddings()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def make_document(session_factory, object_store):
    """
    Factory fixture storing bytes and inserting a document row.

    Returns:
        Callable: async (content, filename, mime_type, status) -> DocumentModel
    """

    async def _make(
        content: bytes = b"hello world",
        filename: str = "notes.txt",
        mime_type: str = "text/plain",
        status: DocumentStatus = DocumentStatus.UPLOADED,
        **fields,
    ) -> DocumentModel:
        doc_id = fields.pop("id", None) or uuid.uuid4()
        storage_path = f"{doc_id}__{filename}"
        await object_store.put(storage_path, content, mime_type)
        async with session_factory() as session:
            document = DocumentModel(
                id=doc_id,
                filename=filename,
                mime_type=mime_type,
                size_bytes=len(content),
                storage_path=storage_path,
                status=status,
                **fields,
            )
            session.add(document)
            await session.commit()
        return document

    return _make
