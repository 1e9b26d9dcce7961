"""CRUD singletons for the documents and chunks tables."""

from docchat.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from docchat.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = ["ChunkCRUD", "DocumentCRUD", "chunk_crud", "document_crud"]
