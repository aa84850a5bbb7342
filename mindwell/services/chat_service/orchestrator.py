"""Chat turn orchestration.

One turn, in order:
1. Validate message and role (all violations reported together)
2. Resolve conversation (create on miss)
3. Reject ended conversations
4. Classify for crisis; annotate the stored message if flagged
5. Append, truncate, call the completion service, append the reply

Steps 3-5 run under the conversation's lock, so at most one turn per
conversation id is in flight. Turns on different ids run concurrently.

The crisis annotation is stored in the user message itself, so it stays
in the context of every later turn of that conversation.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from mindwell.shared.errors import (
    CompletionServiceError,
    ConversationEndedError,
    ValidationError,
)
from mindwell.shared.models import CrisisAnalysis, CrisisSeverity, Role
from mindwell.shared.utils import hash_text_for_audit, log_id
from mindwell.services.llm_service import BaseLLM
from mindwell.services.safety_service import CrisisClassifier, CrisisEventPublisher
from .store import ConversationStats, ConversationStore

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000

# Roles a client may send; assistant messages only come from the model
CLIENT_ROLES = (Role.USER, Role.SYSTEM)


@dataclass(frozen=True)
class TurnResult:
    """Outcome of a successful chat turn."""
    reply_text: str
    conversation_id: str
    crisis_detected: bool = False
    crisis_severity: CrisisSeverity = CrisisSeverity.NONE

    def to_response(self) -> Dict[str, Any]:
        """Build the JSON response body.

        Crisis fields are present only when a crisis was detected.
        """
        body: Dict[str, Any] = {
            "response": self.reply_text,
            "conversation_id": self.conversation_id,
        }
        if self.crisis_detected:
            body["crisis_detected"] = True
            body["crisis_severity"] = self.crisis_severity.value
        return body


def validate_turn(
    message: object,
    role: Optional[str],
    max_length: int = MAX_MESSAGE_LENGTH,
    conversation_id: object = None,
) -> List[str]:
    """Check an inbound turn.

    Returns:
        Human-readable description of every violated constraint
    """
    errors = []

    if not isinstance(message, str) or not message.strip():
        errors.append("Message is required and must be a non-empty string")
    elif len(message.strip()) > max_length:
        errors.append(f"Message must be less than {max_length} characters")

    if role is not None and role not in [r.value for r in CLIENT_ROLES]:
        errors.append('role must be either "user" or "system"')

    if conversation_id is not None and not isinstance(conversation_id, str):
        errors.append("conversation_id must be a string")

    return errors


class ChatOrchestrator:
    """Composes store, classifier and completion service into chat turns."""

    def __init__(
        self,
        store: ConversationStore,
        llm: BaseLLM,
        classifier: Optional[CrisisClassifier] = None,
        crisis_publisher: Optional[CrisisEventPublisher] = None,
        max_message_length: int = MAX_MESSAGE_LENGTH,
    ):
        """Initialize orchestrator with its collaborators.

        Args:
            store: Conversation registry
            llm: Completion service
            classifier: Crisis classifier, defaults to the standard lists
            crisis_publisher: Crisis event sink, defaults to a disabled one
            max_message_length: Maximum trimmed message length
        """
        self.store = store
        self.llm = llm
        self.classifier = classifier or CrisisClassifier()
        self.crisis_publisher = crisis_publisher or CrisisEventPublisher(enabled=False)
        self.max_message_length = max_message_length

    def handle_turn(
        self,
        conversation_id: object,
        role: Optional[str],
        message: object,
    ) -> TurnResult:
        """Process one inbound chat message.

        Args:
            conversation_id: Existing id, or None to start a conversation
            role: "user" (default when None) or "system"
            message: Raw message text

        Returns:
            TurnResult with the model reply and crisis flags

        Raises:
            ValidationError: Bad message, role or conversation id; nothing
                was mutated
            ConversationEndedError: Conversation ended, nothing was mutated
            CompletionServiceError: Upstream failure; the user message
                stays appended without a reply
        """
        errors = validate_turn(
            message, role, self.max_message_length, conversation_id=conversation_id
        )
        if errors:
            logger.warning("CHAT_TURN_INVALID", extra={"errors": errors})
            raise ValidationError(errors)

        resolved_role = Role.parse(role or Role.USER.value)
        conversation, conversation_id = self.store.get_or_create(conversation_id)
        conversation_id_hash = log_id(conversation_id)

        with conversation.lock:
            if not conversation.is_active():
                logger.warning(
                    "CHAT_TURN_REJECTED",
                    extra={
                        "conversation_id_hash": conversation_id_hash,
                        "reason": "conversation_ended",
                    }
                )
                raise ConversationEndedError(conversation_id)

            text = message.strip()
            analysis = self.classifier.classify(text)

            logger.info(
                "CHAT_TURN_STARTED",
                extra={
                    "conversation_id_hash": conversation_id_hash,
                    "text_hash": hash_text_for_audit(text),
                    "message_length": len(text),
                    "history_length": len(conversation),
                }
            )

            if analysis.is_crisis:
                text += analysis.annotation
                self._report_crisis(conversation_id_hash, analysis)

            conversation.add_message(resolved_role, text)
            conversation.truncate()

            try:
                completion = self.llm.complete(conversation.get_messages())
            except CompletionServiceError as e:
                logger.error(
                    "CHAT_TURN_COMPLETION_FAILED",
                    extra={
                        "conversation_id_hash": conversation_id_hash,
                        "error": str(e),
                    }
                )
                raise

            conversation.add_message(Role.ASSISTANT, completion.text)

        logger.info(
            "CHAT_TURN_COMPLETED",
            extra={
                "conversation_id_hash": conversation_id_hash,
                "crisis_detected": analysis.is_crisis,
                "latency_ms": completion.latency_ms,
            }
        )

        return TurnResult(
            reply_text=completion.text,
            conversation_id=conversation_id,
            crisis_detected=analysis.is_crisis,
            crisis_severity=analysis.severity,
        )

    def end_conversation(self, conversation_id: str) -> bool:
        """End a conversation so it rejects further turns.

        Returns:
            False if the conversation does not exist
        """
        conversation = self.store.get(conversation_id)
        if conversation is None:
            return False
        with conversation.lock:
            conversation.end_conversation()
        logger.info(
            "CONVERSATION_ENDED",
            extra={"conversation_id_hash": log_id(conversation_id)}
        )
        return True

    def delete_conversation(self, conversation_id: str) -> bool:
        return self.store.delete(conversation_id)

    def stats(self) -> ConversationStats:
        return self.store.stats()

    def run_maintenance(self, now: Optional[datetime] = None) -> int:
        """Sweep expired conversations.

        Called from the health check when no background sweeper runs.
        """
        return self.store.sweep_expired(now=now)

    def _report_crisis(self, conversation_id_hash: str, analysis: CrisisAnalysis) -> None:
        logger.critical(
            "CRISIS_DETECTED",
            extra={
                "conversation_id_hash": conversation_id_hash,
                "severity": analysis.severity.value,
                "matched_count": len(analysis.matched_keywords),
                "pattern_version": self.classifier.pattern_version,
            }
        )
        self.crisis_publisher.publish_crisis(
            conversation_id_hash=conversation_id_hash,
            severity=analysis.severity.value,
            matched_keywords=analysis.matched_keywords,
            pattern_version=self.classifier.pattern_version,
        )
