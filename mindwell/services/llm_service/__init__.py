"""LLM Service for MindWell.

Completion service used by the chat orchestrator. Provider-specific
clients live behind BaseLLM.complete().
"""
from .base_llm import (
    BaseLLM,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    OpenAICompatibleLLM,
    create_llm,
)

__version__ = "1.0.0"

__all__ = [
    "BaseLLM",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "OpenAICompatibleLLM",
    "create_llm",
]
