"""
Embedding gateway.

Wraps any LangChain `Embeddings` implementation behind the async
`EmbeddingProvider` interface: order-preserving, fixed dimension, no
internal retries. Provider failures surface as `EmbeddingError`.

Dependencies: langchain_core, langchain_openai, langchain_google_genai, langchain_aws
System role: Text-to-vector adapter for ingestion and retrieval
"""

import logging
from collections.abc import Sequence

from langchain_core.embeddings import Embeddings

from docchat.configs.models import EmbeddingSettings
from docchat.core.exceptions import ConfigError, EmbeddingError

logger = logging.getLogger(__name__)


class ZeroEmbeddings(Embeddings):
    """All-zero vectors of a fixed dimension, for exercising ingestion without a provider."""

    def __init__(self, dimension: int) -> None:
        self.dimension = dimension

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [[0.0] * self.dimension for _ in texts]

    def embed_query(self, text: str) -> list[float]:
        return [0.0] * self.dimension


class EmbeddingGateway:
    """Async, validated access to an embedding model."""

    def __init__(self, embeddings: Embeddings, dimension: int, provider: str = "custom") -> None:
        """
        Initialize gateway.

        Args:
            embeddings: LangChain embeddings implementation
            dimension: Expected vector length
            provider: Provider name, used in errors and logs
        """
        self._embeddings = embeddings
        self.dimension = dimension
        self.provider = provider

    def _validate(self, vectors: list[list[float]], expected: int) -> list[list[float]]:
        if len(vectors) != expected:
            raise EmbeddingError(
                f"Provider returned {len(vectors)} vectors for {expected} texts",
                provider=self.provider,
            )
        for vector in vectors:
            if len(vector) != self.dimension:
                raise EmbeddingError(
                    f"Expected dimension {self.dimension}, got {len(vector)}",
                    provider=self.provider,
                )
        return [[float(value) for value in vector] for vector in vectors]

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed a batch of texts.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per text, in input order

        Raises:
            EmbeddingError: Provider failure or malformed response
        """
        if not texts:
            return []
        try:
            vectors = await self._embeddings.aembed_documents(list(texts))
        except Exception as e:
            raise EmbeddingError(
                f"Embedding request failed: {type(e).__name__}: {e}",
                provider=self.provider,
                details={"batch_size": len(texts)},
            ) from e
        return self._validate(vectors, len(texts))

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a search query.

        Raises:
            EmbeddingError: Provider failure or malformed response
        """
        try:
            vector = await self._embeddings.aembed_query(text)
        except Exception as e:
            raise EmbeddingError(
                f"Query embedding failed: {type(e).__name__}: {e}",
                provider=self.provider,
            ) from e
        return self._validate([vector], 1)[0]


def create_embeddings(settings: EmbeddingSettings) -> Embeddings:
    """
    Build the LangChain embeddings client selected by configuration.

    Args:
        settings: Embedding settings

    Returns:
        Embeddings: Provider client (ZeroEmbeddings only when use_fake is set)

    Raises:
        ConfigError: Unknown provider or missing provider credentials
    """
    if settings.use_fake:
        logger.warning("Fake embeddings enabled; vectors are all zeros")
        return ZeroEmbeddings(settings.dimension)

    provider = settings.provider.lower()
    try:
        if provider == "openai":
            from langchain_openai import OpenAIEmbeddings

            return OpenAIEmbeddings(model=settings.model)
        if provider == "google":
            from langchain_google_genai import GoogleGenerativeAIEmbeddings

            return GoogleGenerativeAIEmbeddings(model=settings.model)
        if provider == "bedrock":
            from langchain_aws import BedrockEmbeddings

            return BedrockEmbeddings(model_id=settings.model, region_name=settings.region)
    except Exception as e:
        raise ConfigError(
            f"Cannot initialize {provider} embeddings: {e}",
            setting="EMBEDDING_PROVIDER",
        ) from e
    raise ConfigError(f"Unknown embedding provider: {settings.provider}", setting="EMBEDDING_PROVIDER")


def create_embedding_gateway(settings: EmbeddingSettings) -> EmbeddingGateway:
    """Build an EmbeddingGateway from settings."""
    provider = "fake" if settings.use_fake else settings.provider.lower()
    return EmbeddingGateway(create_embeddings(settings), settings.dimension, provider)
