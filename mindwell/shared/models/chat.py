"""Chat message domain models.

Messages are a closed variant over three roles. Anything else is rejected
before it can reach the completion service.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from mindwell.shared.errors import InvalidRoleError


class Role(Enum):
    """Speaker of a chat message, as understood by the completion API."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def parse(cls, value: Union["Role", str]) -> "Role":
        """Coerce a Role or its string value into a Role.

        Raises:
            InvalidRoleError: If value is not one of the three roles
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidRoleError(value) from None


@dataclass(frozen=True)
class ChatMessage:
    """A single entry in a conversation history.

    Immutable - history entries are replaced, never edited in place.
    """
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to the {role, content} shape used by chat completion APIs."""
        return {"role": self.role.value, "content": self.content}
