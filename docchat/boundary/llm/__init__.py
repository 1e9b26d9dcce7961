"""LangChain-backed embedding and completion adapters."""

from docchat.boundary.llm.completion import CompletionGateway, create_chat_model
from docchat.boundary.llm.embeddings import (
    EmbeddingGateway,
    ZeroEmbeddings,
    create_embedding_gateway,
)

__all__ = [
    "CompletionGateway",
    "EmbeddingGateway",
    "ZeroEmbeddings",
    "create_chat_model",
    "create_embedding_gateway",
]
