"""
Chat completion gateway.

Wraps a LangChain chat model behind the `CompletionProvider` interface.

Dependencies: langchain_core, langchain_openai, langchain_google_genai, langchain_aws
System role: Prompt-to-answer adapter for the chat endpoint
"""

from collections.abc import Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from docchat.configs.models import LLMSettings
from docchat.core.exceptions import CompletionError, ConfigError


class CompletionGateway:
    """Async access to a chat model returning plain answer text."""

    def __init__(self, model: BaseChatModel) -> None:
        self._model = model

    async def complete(self, messages: Sequence[BaseMessage]) -> str:
        """
        Run the model on prompt messages.

        Args:
            messages: System and human messages

        Returns:
            str: Answer text (may be empty)

        Raises:
            CompletionError: If the model call fails
        """
        try:
            response = await self._model.ainvoke(list(messages))
        except Exception as e:
            raise CompletionError(f"Completion failed: {type(e).__name__}: {e}") from e

        content = response.content
        if isinstance(content, list):
            # Content blocks (Gemini, Bedrock Converse)
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return (content or "").strip()


def create_chat_model(settings: LLMSettings) -> BaseChatModel:
    """
    Build the chat model selected by configuration.

    Raises:
        ConfigError: Unknown provider or missing provider credentials
    """
    provider = settings.provider.lower()
    try:
        if provider == "openai":
            from langchain_openai import ChatOpenAI

            return ChatOpenAI(model=settings.chat_model, temperature=settings.temperature)
        if provider == "google":
            from langchain_google_genai import ChatGoogleGenerativeAI

            return ChatGoogleGenerativeAI(model=settings.chat_model, temperature=settings.temperature)
        if provider == "bedrock":
            from langchain_aws import ChatBedrockConverse

            return ChatBedrockConverse(
                model=settings.chat_model,
                region_name=settings.region,
                temperature=settings.temperature,
            )
    except Exception as e:
        raise ConfigError(f"Cannot initialize {provider} chat model: {e}", setting="LLM_PROVIDER") from e
    raise ConfigError(f"Unknown LLM provider: {settings.provider}", setting="LLM_PROVIDER")
