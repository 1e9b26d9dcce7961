"""
Document metadata lookup for citations.

Dependencies: sqlalchemy, docchat.boundary.db.CRUD
System role: DocumentDirectory adapter backed by the documents table
"""

from collections.abc import Mapping, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.core.ports import DocumentRef


class SqlDocumentDirectory:
    """Resolve document ids to file name and storage key in one query."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def describe(self, document_ids: Sequence[UUID]) -> Mapping[UUID, DocumentRef]:
        async with self._session_factory() as session:
            documents = await document_crud.get_many(session, document_ids)
        return {
            document.id: DocumentRef(filename=document.filename, storage_path=document.storage_path)
            for document in documents
        }
