"""Tests for CrisisEventPublisher.

Publishing is a notification side channel, so every failure path must
return False instead of raising.
"""
import json
import pytest
from unittest.mock import patch, MagicMock

from mindwell.services.safety_service.crisis_publisher import (
    ChatCrisisEvent,
    CrisisEventPublisher,
)


def _publish(publisher):
    return publisher.publish_crisis(
        conversation_id_hash="hash_abc",
        severity="high",
        matched_keywords=["kill myself"],
        pattern_version="2025.09.01",
    )


class TestChatCrisisEvent:
    """Tests for ChatCrisisEvent dataclass."""

    def test_event_defaults(self):
        event = ChatCrisisEvent(
            event_id="evt_123",
            conversation_id_hash="hash_abc",
            severity="moderate",
        )

        assert event.event_type == "chat.crisis.detected"
        assert event.matched_keywords == []

    def test_event_to_kinesis_payload(self):
        """Event should convert to a Kinesis payload."""
        event = ChatCrisisEvent(
            event_id="evt_123",
            conversation_id_hash="hash_abc",
            severity="high",
            matched_keywords=["overdose"],
            pattern_version="2025.09.01",
        )

        payload = event.to_kinesis_payload()

        assert payload["event_id"] == "evt_123"
        assert payload["event_type"] == "chat.crisis.detected"
        assert payload["source"] == "chat-service"
        assert payload["timestamp"].endswith("Z")
        assert payload["data"]["conversation_id_hash"] == "hash_abc"
        assert payload["data"]["severity"] == "high"
        assert payload["data"]["matched_keywords"] == ["overdose"]
        assert payload["data"]["pattern_version"] == "2025.09.01"

    def test_event_is_immutable(self):
        event = ChatCrisisEvent(
            event_id="evt_123",
            conversation_id_hash="hash_abc",
            severity="high",
        )

        with pytest.raises(Exception):  # FrozenInstanceError
            event.severity = "none"


class TestCrisisEventPublisher:
    """Tests for CrisisEventPublisher."""

    def test_publisher_initialization(self):
        publisher = CrisisEventPublisher(
            stream_name="test-stream",
            enabled=True,
            region="us-west-2",
        )

        assert publisher.stream_name == "test-stream"
        assert publisher.enabled is True
        assert publisher.region == "us-west-2"

    def test_disabled_by_default(self):
        assert CrisisEventPublisher().enabled is False

    def test_publish_disabled_returns_false(self):
        publisher = CrisisEventPublisher(enabled=False)
        assert _publish(publisher) is False

    @patch("boto3.client")
    def test_publish_success(self, mock_boto_client):
        """Successful publish should return True and partition by conversation."""
        mock_kinesis = MagicMock()
        mock_kinesis.put_record.return_value = {
            "ShardId": "shard-001",
            "SequenceNumber": "12345",
        }
        mock_boto_client.return_value = mock_kinesis

        publisher = CrisisEventPublisher(stream_name="test-stream", enabled=True)

        assert _publish(publisher) is True
        mock_kinesis.put_record.assert_called_once()
        kwargs = mock_kinesis.put_record.call_args.kwargs
        assert kwargs["StreamName"] == "test-stream"
        assert kwargs["PartitionKey"] == "hash_abc"
        data = json.loads(kwargs["Data"])
        assert data["data"]["severity"] == "high"

    @patch("boto3.client")
    def test_publish_failure_returns_false(self, mock_boto_client):
        """A Kinesis error must not raise."""
        mock_kinesis = MagicMock()
        mock_kinesis.put_record.side_effect = Exception("Kinesis unavailable")
        mock_boto_client.return_value = mock_kinesis

        publisher = CrisisEventPublisher(enabled=True)

        assert _publish(publisher) is False

    @patch("boto3.client")
    def test_client_init_failure_returns_false(self, mock_boto_client):
        """Client creation failure falls back to a log line."""
        mock_boto_client.side_effect = Exception("No credentials")

        publisher = CrisisEventPublisher(enabled=True)

        assert publisher.kinesis_client is None
        assert _publish(publisher) is False
