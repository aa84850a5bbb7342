"""Chat service configuration.

Read from environment variables at startup. No config files.
"""
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from mindwell.services.llm_service import LLMConfig, LLMProvider

SWEEP_MODE_ON_HEALTH = "on_health"
SWEEP_MODE_BACKGROUND = "background"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class ChatServiceConfig:
    """Configuration for the chat service process."""

    environment: str = "development"
    debug: bool = False
    port: int = 3000

    # Completion service
    llm_provider: LLMProvider = LLMProvider.GROQ
    llm_api_key: Optional[str] = None
    llm_model: str = "llama-3.1-8b-instant"
    llm_base_url: Optional[str] = None
    llm_timeout_seconds: int = 30

    # Conversation lifecycle
    max_message_length: int = 2000
    conversation_ttl_hours: int = 24
    # "on_health": sweep from /api/health; "background": sweeper thread
    sweep_mode: str = SWEEP_MODE_ON_HEALTH
    sweep_interval_seconds: int = 60 * 60

    # Crisis event publishing
    crisis_publishing_enabled: bool = False
    kinesis_stream_name: str = "mindwell-crisis-events"

    def __post_init__(self):
        if self.sweep_mode not in (SWEEP_MODE_ON_HEALTH, SWEEP_MODE_BACKGROUND):
            raise ValueError(f"Unknown sweep mode: {self.sweep_mode}")

    @classmethod
    def from_env(cls) -> "ChatServiceConfig":
        """Build configuration from environment variables."""
        return cls(
            environment=os.getenv("APP_ENV", "development"),
            debug=_env_flag("DEBUG"),
            port=int(os.getenv("PORT", "3000")),
            llm_provider=LLMProvider(os.getenv("LLM_PROVIDER", "groq")),
            llm_api_key=os.getenv("GROQ_API_KEY") or os.getenv("LLM_API_KEY"),
            llm_model=os.getenv("LLM_MODEL", "llama-3.1-8b-instant"),
            llm_base_url=os.getenv("LLM_BASE_URL"),
            llm_timeout_seconds=int(os.getenv("LLM_TIMEOUT_SECONDS", "30")),
            max_message_length=int(os.getenv("MAX_MESSAGE_LENGTH", "2000")),
            conversation_ttl_hours=int(os.getenv("CONVERSATION_TTL_HOURS", "24")),
            sweep_mode=os.getenv("SWEEP_MODE", SWEEP_MODE_ON_HEALTH),
            sweep_interval_seconds=int(os.getenv("SWEEP_INTERVAL_SECONDS", "3600")),
            crisis_publishing_enabled=_env_flag("CRISIS_PUBLISHING_ENABLED"),
            kinesis_stream_name=os.getenv("KINESIS_STREAM_NAME", "mindwell-crisis-events"),
        )

    @property
    def conversation_ttl(self) -> timedelta:
        return timedelta(hours=self.conversation_ttl_hours)

    def llm_config(self) -> LLMConfig:
        return LLMConfig(
            provider=self.llm_provider,
            model_name=self.llm_model,
            endpoint=self.llm_base_url,
            api_key=self.llm_api_key,
            timeout_seconds=self.llm_timeout_seconds,
        )
