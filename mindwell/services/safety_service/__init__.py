"""Safety Service: lexical crisis detection for chat messages.

Every student message is classified BEFORE it is stored or sent to the
LLM. Crisis messages are annotated so the model answers with crisis
resources, and a crisis event is published for human follow-up.

Components:
- classifier.py: CrisisClassifier (phrase + pattern matching, severity)
- config.py: Phrase lists and the crisis annotation text
- resources.py: Static crisis resources and response templates
- crisis_publisher.py: Kinesis event publishing

Usage:
    from mindwell.services.safety_service import classify
    analysis = classify("I feel hopeless")
    analysis.is_crisis, analysis.severity
"""

from .classifier import CrisisClassifier, classify
from .config import (
    SafetyConfig,
    CRISIS_CONTEXT,
    CRISIS_KEYWORDS,
    CRISIS_PATTERNS,
    IMMEDIATE_RISK_KEYWORDS,
)
from .crisis_publisher import CrisisEventPublisher, ChatCrisisEvent
from .resources import get_crisis_resources, get_crisis_response_template

__all__ = [
    "CrisisClassifier",
    "classify",
    "SafetyConfig",
    "CRISIS_CONTEXT",
    "CRISIS_KEYWORDS",
    "CRISIS_PATTERNS",
    "IMMEDIATE_RISK_KEYWORDS",
    "CrisisEventPublisher",
    "ChatCrisisEvent",
    "get_crisis_resources",
    "get_crisis_response_template",
]
