"""Base LLM interface and implementations.

The chat core treats the model provider as an opaque completion service:
it hands over the ordered message history and gets text back, or a
CompletionServiceError. Retries, timeouts and backoff belong to the
provider client, not the core.
"""
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from mindwell.shared.errors import CompletionServiceError
from mindwell.shared.models import ChatMessage

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class LLMProvider(Enum):
    """Supported LLM providers."""
    GROQ = "groq"
    OPENAI = "openai"


@dataclass
class LLMConfig:
    """Configuration for LLM inference."""
    provider: LLMProvider = LLMProvider.GROQ
    model_name: str = "llama-3.1-8b-instant"
    endpoint: Optional[str] = None
    api_key: Optional[str] = None
    max_tokens: int = 1024
    temperature: float = 0.7
    top_p: float = 1.0
    timeout_seconds: int = 30


@dataclass
class LLMResponse:
    """Response from LLM inference."""
    text: str
    model: str
    provider: str
    tokens_used: Optional[int] = None
    latency_ms: Optional[float] = None
    metadata: Optional[Dict] = None


class BaseLLM(ABC):
    """Abstract base class for completion services."""

    def __init__(self, config: LLMConfig):
        """Initialize LLM with configuration.

        Args:
            config: LLM configuration
        """
        self.config = config
        logger.info(
            "LLM_INITIALIZED",
            extra={
                "provider": config.provider.value,
                "model": config.model_name,
            }
        )

    @property
    def is_configured(self) -> bool:
        """Whether credentials are present for the provider."""
        return bool(self.config.api_key)

    @abstractmethod
    def complete(self, messages: Sequence[ChatMessage]) -> LLMResponse:
        """Generate the next assistant reply for a conversation.

        Args:
            messages: Ordered history, system preamble first

        Returns:
            LLMResponse object

        Raises:
            CompletionServiceError: On any transport or provider failure
        """
        pass

    @staticmethod
    def to_payload(messages: Sequence[ChatMessage]) -> List[Dict[str, str]]:
        """Convert history into chat completion message dicts."""
        return [message.to_dict() for message in messages]


class OpenAICompatibleLLM(BaseLLM):
    """Chat completions over the OpenAI SDK.

    Works against any OpenAI-compatible endpoint; Groq is the default.
    """

    def __init__(self, config: LLMConfig):
        super().__init__(config)
        if config.endpoint:
            self.base_url = config.endpoint
        elif config.provider == LLMProvider.GROQ:
            self.base_url = GROQ_BASE_URL
        else:
            self.base_url = None
        self._client = None

    @property
    def client(self):
        """Lazy initialization of the SDK client.

        Raises:
            CompletionServiceError: If no API key is configured
        """
        if self._client is None:
            if not self.config.api_key:
                raise CompletionServiceError(
                    f"{self._label} API error: API key environment variable is required"
                )
            import openai
            self._client = openai.OpenAI(
                api_key=self.config.api_key,
                base_url=self.base_url,
                timeout=self.config.timeout_seconds,
            )
        return self._client

    @property
    def _label(self) -> str:
        return "Groq" if self.config.provider == LLMProvider.GROQ else "OpenAI"

    def complete(self, messages: Sequence[ChatMessage]) -> LLMResponse:
        start_time = time.time()

        # Everything from client construction to response parsing is provider-side
        try:
            response = self.client.chat.completions.create(
                model=self.config.model_name,
                messages=self.to_payload(messages),
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                top_p=self.config.top_p,
                stream=False,
            )
            text = response.choices[0].message.content or ""
            tokens_used = response.usage.total_tokens if response.usage else None
        except CompletionServiceError:
            raise
        except Exception as e:
            logger.error(
                "LLM_COMPLETION_FAILED",
                extra={
                    "model": self.config.model_name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                }
            )
            raise CompletionServiceError(f"{self._label} API error: {e}") from e

        latency_ms = (time.time() - start_time) * 1000

        logger.info(
            "LLM_COMPLETION_SUCCEEDED",
            extra={
                "model": self.config.model_name,
                "latency_ms": latency_ms,
                "tokens_used": tokens_used,
            }
        )

        return LLMResponse(
            text=text,
            model=self.config.model_name,
            provider=self.config.provider.value,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
        )


def create_llm(config: LLMConfig) -> BaseLLM:
    """Factory function to create LLM instance.

    Raises:
        ValueError: If provider not supported
    """
    if config.provider in (LLMProvider.GROQ, LLMProvider.OPENAI):
        return OpenAICompatibleLLM(config)
    raise ValueError(f"Unsupported provider: {config.provider}")
