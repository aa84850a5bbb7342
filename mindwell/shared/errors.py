"""Error taxonomy for the chat pipeline.

Every failure path surfaces one of these types so the HTTP boundary can
map it to a status code without inspecting messages:

- ValidationError -> 400 with the full list of violated constraints
- ConversationEndedError -> 400
- CompletionServiceError -> 503, upstream detail is logged, never shown
- InvalidRoleError -> internal misuse of the Conversation API
"""
from typing import List, Optional


class ChatServiceError(Exception):
    """Base exception for chat service errors."""
    pass


class ValidationError(ChatServiceError):
    """Inbound turn failed validation.

    Carries every violated constraint, not just the first one.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ConversationEndedError(ChatServiceError):
    """Turn requested on a conversation that has been ended."""

    def __init__(self, conversation_id: Optional[str] = None):
        self.conversation_id = conversation_id
        super().__init__("The chat session has ended. Please start a new session.")


class CompletionServiceError(ChatServiceError):
    """The upstream completion service failed.

    The message carries the provider's error text for logging only.
    """
    pass


class InvalidRoleError(ChatServiceError):
    """Message role is outside {system, user, assistant}."""

    def __init__(self, role: object):
        self.role = role
        super().__init__(f"Invalid message role: {role!r}")
