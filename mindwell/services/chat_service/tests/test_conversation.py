"""Tests for Conversation - preamble invariant and truncation policy."""
from datetime import datetime, timedelta

import pytest

from mindwell.shared.errors import InvalidRoleError
from mindwell.shared.models import ChatMessage, Role
from mindwell.services.chat_service.conversation import (
    MAX_HISTORY_MESSAGES,
    SYSTEM_PROMPT,
    Conversation,
)


def _fill(conversation, count):
    for i in range(count):
        role = Role.USER if i % 2 == 0 else Role.ASSISTANT
        conversation.add_message(role, f"message {i}")


class TestConstruction:

    def test_starts_with_preamble_only(self):
        conversation = Conversation()

        assert conversation.get_messages() == (SYSTEM_PROMPT,)
        assert conversation.is_active() is True
        assert conversation.created_at == conversation.last_activity_at

    def test_preamble_must_be_system_role(self):
        with pytest.raises(ValueError):
            Conversation(system_prompt=ChatMessage(Role.USER, "hi"))

    def test_system_prompt_mentions_crisis_resources(self):
        assert SYSTEM_PROMPT.role == Role.SYSTEM
        assert "988" in SYSTEM_PROMPT.content
        assert "741741" in SYSTEM_PROMPT.content


class TestAddMessage:

    def test_appends_in_order(self):
        conversation = Conversation()
        conversation.add_message("user", "Hi")
        conversation.add_message(Role.ASSISTANT, "Hello")

        messages = conversation.get_messages()
        assert [m.role for m in messages] == [Role.SYSTEM, Role.USER, Role.ASSISTANT]
        assert messages[1].content == "Hi"

    def test_updates_last_activity(self):
        conversation = Conversation(now=datetime.utcnow() - timedelta(hours=1))
        before = conversation.last_activity_at

        conversation.add_message("user", "Hi")

        assert conversation.last_activity_at > before
        assert conversation.created_at == before

    @pytest.mark.parametrize("role", ["moderator", "", None, "USER"])
    def test_invalid_role_rejected(self, role):
        conversation = Conversation()

        with pytest.raises(InvalidRoleError):
            conversation.add_message(role, "Hi")
        assert len(conversation) == 1

    def test_get_messages_is_read_only(self):
        conversation = Conversation()
        messages = conversation.get_messages()

        with pytest.raises(AttributeError):
            messages.append(ChatMessage(Role.USER, "sneaky"))
        assert len(conversation) == 1

    def test_to_prompt(self):
        conversation = Conversation()
        conversation.add_message("user", "Hi")

        prompt = conversation.to_prompt()
        assert prompt[0]["role"] == "system"
        assert prompt[1] == {"role": "user", "content": "Hi"}


class TestEndConversation:

    def test_end_is_irreversible(self):
        conversation = Conversation()
        conversation.end_conversation()
        conversation.end_conversation()

        assert conversation.is_active() is False


class TestTruncate:
    """Context window management: preamble + the most recent 20 messages."""

    def test_no_op_at_bound(self):
        conversation = Conversation()
        _fill(conversation, MAX_HISTORY_MESSAGES)
        before = conversation.get_messages()

        assert conversation.truncate() is False
        assert conversation.get_messages() == before
        assert len(conversation) == 21

    def test_truncates_above_bound(self):
        conversation = Conversation()
        _fill(conversation, 30)
        before = conversation.get_messages()

        assert conversation.truncate() is True

        after = conversation.get_messages()
        assert len(after) == 21
        assert after[0] == SYSTEM_PROMPT
        assert after[1:] == before[-20:]
        assert after[1].content == "message 10"

    def test_idempotent(self):
        conversation = Conversation()
        _fill(conversation, 25)

        conversation.truncate()
        first = conversation.get_messages()
        assert conversation.truncate() is False
        assert conversation.get_messages() == first

    def test_preamble_survives_any_sequence(self):
        conversation = Conversation()
        for round_number in range(5):
            _fill(conversation, 7 + round_number)
            conversation.truncate()
            assert conversation.get_messages()[0] == SYSTEM_PROMPT
            assert len(conversation) <= MAX_HISTORY_MESSAGES + 1

    def test_custom_bound(self):
        conversation = Conversation(max_history=4)
        _fill(conversation, 6)

        conversation.truncate()

        assert len(conversation) == 5
        assert conversation.get_messages()[1].content == "message 2"
