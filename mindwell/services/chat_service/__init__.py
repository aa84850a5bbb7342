"""Chat Service: conversation state and turn orchestration.

Components:
- conversation.py: Conversation entity (preamble, history, truncation)
- store.py: ConversationStore (create-on-miss, expiry sweep) and sweeper
- orchestrator.py: ChatOrchestrator.handle_turn()
- config.py: Environment configuration
- handler.py: Flask HTTP endpoints (/api/chat, /api/health, ...)

Usage:
    # As HTTP service
    POST /api/chat {"message": "...", "conversation_id": "..."}

    # Direct import
    store = ConversationStore()
    orchestrator = ChatOrchestrator(store=store, llm=llm)
    result = orchestrator.handle_turn(None, "user", "Hi")
"""

from .conversation import Conversation, MAX_HISTORY_MESSAGES, SYSTEM_PROMPT
from .orchestrator import ChatOrchestrator, TurnResult, validate_turn
from .store import ConversationStats, ConversationStore, ConversationSweeper

__all__ = [
    "Conversation",
    "MAX_HISTORY_MESSAGES",
    "SYSTEM_PROMPT",
    "ChatOrchestrator",
    "TurnResult",
    "validate_turn",
    "ConversationStats",
    "ConversationStore",
    "ConversationSweeper",
]
