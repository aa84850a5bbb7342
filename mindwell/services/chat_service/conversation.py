"""Conversation entity - bounded multi-turn history for one chat session.

The message list is the literal prompt context sent to the completion
service, so its order matters and messages[0] is always the system
preamble.
"""
import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from mindwell.shared.models import ChatMessage, Role

logger = logging.getLogger(__name__)

# System preamble + this many most recent messages are kept
MAX_HISTORY_MESSAGES = 20

SYSTEM_PROMPT = ChatMessage(
    role=Role.SYSTEM,
    content="""You are MindWell AI, a compassionate and knowledgeable mental health support assistant designed specifically for students. Your role is to:

1. PROVIDE EMOTIONAL SUPPORT: Listen actively and respond with empathy to students' mental health concerns
2. OFFER PRACTICAL GUIDANCE: Share evidence-based coping strategies, stress management techniques, and wellness tips
3. EDUCATE ABOUT MENTAL HEALTH: Provide information about common mental health conditions, symptoms, and when to seek help
4. PROMOTE HELP-SEEKING: Encourage students to reach out to professional support when needed
5. CRISIS AWARENESS: Recognize signs of crisis and provide appropriate resources

IMPORTANT GUIDELINES:
- Always be empathetic, non-judgmental, and supportive
- Never provide medical diagnoses or replace professional mental health care
- If someone expresses thoughts of self-harm or suicide, immediately provide crisis resources
- Focus on student-specific challenges: academic stress, social anxiety, homesickness, financial stress, etc.
- Promote healthy coping strategies and self-care practices
- Encourage connection with campus resources and professional support
- Use a warm, understanding tone while maintaining professional boundaries

CRISIS RESOURCES TO SHARE WHEN NEEDED:
- National Suicide Prevention Lifeline: 988
- Crisis Text Line: Text HOME to 741741
- Campus counseling services
- Emergency services: 911

Remember: You are a supportive companion in their mental health journey, not a replacement for professional care.""",
)


class Conversation:
    """A single chat session.

    Owned exclusively by ConversationStore. Callers that mutate a
    conversation must hold `lock` for the whole read-modify-write turn.
    """

    def __init__(
        self,
        system_prompt: ChatMessage = SYSTEM_PROMPT,
        max_history: int = MAX_HISTORY_MESSAGES,
        now: Optional[datetime] = None,
    ):
        """Initialize conversation with the system preamble as its only message.

        Args:
            system_prompt: Fixed preamble, must have the system role
            max_history: Messages kept after the preamble on truncate()
            now: Creation time, defaults to utcnow
        """
        if system_prompt.role != Role.SYSTEM:
            raise ValueError("Conversation preamble must have the system role")

        created = now or datetime.utcnow()
        self._system_prompt = system_prompt
        self._messages: List[ChatMessage] = [system_prompt]
        self.max_history = max_history
        self.active = True
        self.created_at = created
        self.last_activity_at = created
        self.lock = threading.Lock()

    def add_message(self, role: Union[Role, str], content: str) -> None:
        """Append a message and refresh the activity timestamp.

        Raises:
            InvalidRoleError: If role is not system, user or assistant
        """
        self._messages.append(ChatMessage(role=Role.parse(role), content=content))
        self.last_activity_at = datetime.utcnow()

    def get_messages(self) -> Tuple[ChatMessage, ...]:
        """Full history in insertion order, preamble first."""
        return tuple(self._messages)

    def to_prompt(self) -> List[Dict[str, str]]:
        return [message.to_dict() for message in self._messages]

    def is_active(self) -> bool:
        return self.active

    def end_conversation(self) -> None:
        """Mark the conversation ended. There is no way back."""
        self.active = False

    def truncate(self) -> bool:
        """Drop the oldest turns, keeping the preamble and the most recent ones.

        Idempotent: a conversation already within the bound is left alone.

        Returns:
            True if any messages were dropped
        """
        if len(self._messages) <= self.max_history + 1:
            return False

        dropped = len(self._messages) - self.max_history - 1
        self._messages = [self._system_prompt] + self._messages[-self.max_history:]

        logger.debug(
            "CONVERSATION_TRUNCATED",
            extra={"dropped": dropped, "retained": len(self._messages)}
        )
        return True

    def __len__(self) -> int:
        return len(self._messages)
