"""Shared domain models for MindWell services."""
from .chat import ChatMessage, Role
from .crisis import CrisisAnalysis, CrisisSeverity

__all__ = [
    "ChatMessage",
    "Role",
    "CrisisAnalysis",
    "CrisisSeverity",
]
