"""
Model provider configuration.

Embedding and chat-completion provider selection. Providers map onto
LangChain integrations: openai, google (Gemini) and bedrock.

Dependencies: pydantic, pydantic_settings
System role: LLM and embedding provider configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingSettings(BaseSettings):
    """Embedding provider settings."""

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(default="openai", description="openai, google or bedrock")
    model: str = Field(
        default="text-embedding-3-small",
        description="Provider model identifier",
    )
    dimension: int = Field(default=1536, description="Vector dimension produced by the model")
    region: str = Field(default="us-east-1", description="AWS region (bedrock only)")
    use_fake: bool = Field(
        default=False,
        description="Return all-zero vectors instead of calling a provider",
    )


class LLMSettings(BaseSettings):
    """Chat completion provider settings."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(default="openai", description="openai, google or bedrock")
    chat_model: str = Field(default="gpt-4o-mini", description="Chat model identifier")
    temperature: float = Field(default=0.2, description="Sampling temperature")
    region: str = Field(default="us-east-1", description="AWS region (bedrock only)")
