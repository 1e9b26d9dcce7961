"""
Exception hierarchy for the document chat service.

Every error carries a human-readable message plus a details dict that is
safe to log. Ingestion errors end up on the document row; retrieval
errors are absorbed by the fallback tiers; the HTTP layer maps the rest.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from enum import Enum
from typing import Any


class DocChatException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigError(DocChatException):
    """Raised when required configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)


class DocumentNotFoundError(DocChatException):
    """Raised when a document row does not exist."""

    def __init__(self, document_id: Any, details: dict[str, Any] | None = None) -> None:
        """
        Initialize document not found error.

        Args:
            document_id: ID of the missing document
            details: Additional context
        """
        details = details or {}
        details["document_id"] = str(document_id)
        super().__init__(f"Document not found: {document_id}", details)


class DocumentProcessingError(DocChatException):
    """Base exception for ingestion pipeline errors."""

    def __init__(
        self,
        message: str,
        document_id: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = str(document_id)
        super().__init__(message, details)


class ExtractionReason(str, Enum):
    """Why text extraction failed."""

    UNSUPPORTED_FORMAT = "unsupported-format"
    LIBRARY_FAILURE = "library-failure"
    EMPTY_RESULT = "empty-result"
    TOO_LARGE = "too-large"


class ExtractionError(DocumentProcessingError):
    """Raised when a file cannot be turned into text."""

    def __init__(
        self,
        message: str,
        reason: ExtractionReason,
        document_id: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize extraction error.

        Args:
            message: Error message
            reason: Failure category
            document_id: ID of the document
            details: Additional context (mime type, file name)
        """
        details = details or {}
        details["reason"] = reason.value
        self.reason = reason
        super().__init__(message, document_id, details)


class EmptyExtractionError(ExtractionError):
    """Raised when extraction succeeds but yields no text after normalization."""

    def __init__(self, message: str = "No text could be extracted", **kwargs) -> None:
        super().__init__(message, ExtractionReason.EMPTY_RESULT, **kwargs)


class NoChunksError(DocumentProcessingError):
    """Raised when chunking produced nothing to index."""

    pass


class StaleGenerationError(DocumentProcessingError):
    """Raised when a newer ingestion run has superseded the current one."""

    def __init__(self, document_id: Any, generation: int, current: int | None = None) -> None:
        super().__init__(
            f"Ingestion run {generation} superseded",
            document_id,
            {"generation": generation, "current_generation": current},
        )
        self.generation = generation


class EmbeddingError(DocChatException):
    """Raised when the embedding provider fails or returns malformed vectors."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, details)


class SearchError(DocChatException):
    """Raised when a ranked-search tier fails."""

    def __init__(
        self,
        message: str,
        tier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize search error.

        Args:
            message: Error message
            tier: Retrieval tier that failed (hybrid, vector, local)
            details: Additional context
        """
        details = details or {}
        if tier:
            details["tier"] = tier
        super().__init__(message, details)


class StorageError(DocChatException):
    """Raised when object storage operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize storage error.

        Args:
            message: Error message
            operation: Operation that failed (put, get, sign)
            key: Object key involved
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        if key:
            details["key"] = key
        super().__init__(message, details)


class CompletionError(DocChatException):
    """Raised when the chat model call fails."""

    pass


class NoContextError(DocChatException):
    """Raised when retrieval produced no fragments to answer from."""

    def __init__(self, message: str = "No relevant context found") -> None:
        super().__init__(message)
