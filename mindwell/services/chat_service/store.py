"""In-memory conversation store.

Process-wide registry of Conversation objects, keyed by conversation id.
State lives only in process memory; a restart loses every conversation.

Per-key turn serialization is the orchestrator's job (via
Conversation.lock). This store only guards its own mapping.
"""
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from mindwell.shared.models import ChatMessage
from mindwell.shared.utils import log_id
from .conversation import Conversation, MAX_HISTORY_MESSAGES, SYSTEM_PROMPT

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)
DEFAULT_SWEEP_INTERVAL_SECONDS = 60 * 60


@dataclass(frozen=True)
class ConversationStats:
    """Point-in-time view of the store for health checks."""
    total: int
    active: int
    last_sweep_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_conversations": self.total,
            "active_conversations": self.active,
            "last_cleanup": self.last_sweep_at.isoformat() if self.last_sweep_at else None,
        }


class ConversationStore:
    """Keyed registry of conversations with create-on-miss and expiry."""

    def __init__(
        self,
        system_prompt: ChatMessage = SYSTEM_PROMPT,
        ttl: timedelta = DEFAULT_TTL,
        max_history: int = MAX_HISTORY_MESSAGES,
    ):
        """Initialize an empty store.

        Args:
            system_prompt: Preamble for every new conversation
            ttl: Inactivity window after which sweep_expired() reclaims
            max_history: Truncation bound passed to new conversations
        """
        self.system_prompt = system_prompt
        self.ttl = ttl
        self.max_history = max_history
        self._conversations: Dict[str, Conversation] = {}
        self._lock = threading.Lock()
        self.last_sweep_at: Optional[datetime] = None

    def get_or_create(self, conversation_id: Optional[str] = None) -> Tuple[Conversation, str]:
        """Resolve a conversation, creating it if the id is unknown.

        Side effect: an absent id generates a fresh one and an unknown id
        registers a new conversation under it. Callers must use the
        returned id for every later call.

        Returns:
            (conversation, resolved conversation id)
        """
        if not conversation_id:
            conversation_id = str(uuid.uuid4())

        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                conversation = Conversation(
                    system_prompt=self.system_prompt,
                    max_history=self.max_history,
                )
                self._conversations[conversation_id] = conversation
                created = True
            else:
                created = False

        if created:
            logger.info(
                "CONVERSATION_CREATED",
                extra={"conversation_id_hash": log_id(conversation_id)}
            )
        return conversation, conversation_id

    def get(self, conversation_id: str) -> Optional[Conversation]:
        """Look up a conversation without creating one."""
        with self._lock:
            return self._conversations.get(conversation_id)

    def delete(self, conversation_id: str) -> bool:
        """Remove a conversation.

        Returns:
            True if a conversation was removed
        """
        with self._lock:
            removed = self._conversations.pop(conversation_id, None) is not None

        if removed:
            logger.info(
                "CONVERSATION_DELETED",
                extra={"conversation_id_hash": log_id(conversation_id)}
            )
        return removed

    def sweep_expired(
        self,
        now: Optional[datetime] = None,
        ttl: Optional[timedelta] = None,
    ) -> int:
        """Remove conversations inactive for longer than the TTL.

        Args:
            now: Reference time, defaults to utcnow
            ttl: Inactivity window, defaults to the store TTL

        Returns:
            Number of conversations removed
        """
        now = now or datetime.utcnow()
        cutoff = now - (ttl if ttl is not None else self.ttl)

        with self._lock:
            expired = [
                key for key, conversation in self._conversations.items()
                if conversation.last_activity_at < cutoff
            ]
            for key in expired:
                del self._conversations[key]
            self.last_sweep_at = now
            remaining = len(self._conversations)

        logger.info(
            "CONVERSATIONS_SWEPT",
            extra={"removed": len(expired), "remaining": remaining}
        )
        return len(expired)

    def stats(self) -> ConversationStats:
        with self._lock:
            conversations = list(self._conversations.values())
            last_sweep_at = self.last_sweep_at
        return ConversationStats(
            total=len(conversations),
            active=sum(1 for c in conversations if c.is_active()),
            last_sweep_at=last_sweep_at,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._conversations)

    def __contains__(self, conversation_id: object) -> bool:
        with self._lock:
            return conversation_id in self._conversations


class ConversationSweeper:
    """Background thread that sweeps a store on a fixed interval.

    Only meaningful for a long-lived server process. Request-scoped
    deployments sweep from the health check instead.
    """

    def __init__(
        self,
        store: ConversationStore,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ):
        self.store = store
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="conversation-sweeper",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "CONVERSATION_SWEEPER_STARTED",
            extra={"interval_seconds": self.interval_seconds}
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("CONVERSATION_SWEEPER_STOPPED")

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.store.sweep_expired()
            except Exception as e:
                # Keep the thread alive; the next tick retries
                logger.error(
                    "CONVERSATION_SWEEP_FAILED",
                    extra={"error": str(e), "error_type": type(e).__name__}
                )
