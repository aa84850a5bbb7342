"""Crisis event publisher for the chat service.

Publishes a crisis event to a Kinesis stream whenever a chat turn is
classified as crisis, so counselors and monitoring can follow up outside
the chat flow.

Publishing is a side channel: a failure here never blocks or fails the
chat turn. Failures are logged at CRITICAL level for alerting instead.
"""
import json
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatCrisisEvent:
    """Immutable crisis event emitted by the chat service."""
    event_id: str
    conversation_id_hash: str
    severity: str
    event_type: str = "chat.crisis.detected"
    matched_keywords: List[str] = field(default_factory=list)
    pattern_version: str = ""
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_kinesis_payload(self) -> dict:
        """Convert to Kinesis record payload."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat() + "Z",
            "source": "chat-service",
            "data": {
                "conversation_id_hash": self.conversation_id_hash,
                "severity": self.severity,
                "matched_keywords": list(self.matched_keywords),
                "pattern_version": self.pattern_version,
            }
        }


class CrisisEventPublisher:
    """Publishes chat crisis events to a Kinesis stream."""

    def __init__(
        self,
        stream_name: str = "mindwell-crisis-events",
        enabled: bool = False,
        region: Optional[str] = None,
    ):
        """Initialize publisher.

        Args:
            stream_name: Kinesis stream name
            enabled: Whether publishing is enabled (off for local dev)
            region: AWS region (defaults to AWS_REGION env var)
        """
        self.stream_name = stream_name
        self.enabled = enabled
        self.region = region or os.getenv("AWS_REGION", "us-east-1")
        self._kinesis_client = None

        logger.info(
            "CRISIS_PUBLISHER_INITIALIZED",
            extra={
                "stream_name": stream_name,
                "enabled": enabled,
                "region": self.region,
            }
        )

    @property
    def kinesis_client(self):
        """Lazy initialization of Kinesis client."""
        if self._kinesis_client is None and self.enabled:
            try:
                import boto3
                self._kinesis_client = boto3.client(
                    "kinesis",
                    region_name=self.region,
                )
            except Exception as e:
                logger.error(
                    "KINESIS_CLIENT_INIT_FAILED",
                    extra={"error": str(e), "error_type": type(e).__name__}
                )
        return self._kinesis_client

    def publish_crisis(
        self,
        conversation_id_hash: str,
        severity: str,
        matched_keywords: List[str],
        pattern_version: str,
    ) -> bool:
        """Publish a crisis event.

        Args:
            conversation_id_hash: Hashed conversation identifier
            severity: Crisis severity value ("moderate" or "high")
            matched_keywords: Phrases and patterns that matched
            pattern_version: Phrase list version for traceability

        Returns:
            True if published successfully, False otherwise
        """
        if not self.enabled:
            logger.info(
                "CRISIS_PUBLISH_SKIPPED",
                extra={
                    "conversation_id_hash": conversation_id_hash,
                    "reason": "publishing_disabled",
                }
            )
            return False

        event = ChatCrisisEvent(
            event_id=f"evt_{uuid.uuid4().hex[:12]}",
            conversation_id_hash=conversation_id_hash,
            severity=severity,
            matched_keywords=list(matched_keywords),
            pattern_version=pattern_version,
        )
        payload = event.to_kinesis_payload()

        try:
            if self.kinesis_client is None:
                logger.critical(
                    "CRISIS_EVENT_FALLBACK_LOG",
                    extra={
                        "event_id": event.event_id,
                        "payload": json.dumps(payload),
                        "reason": "kinesis_client_unavailable",
                        "action": "MANUAL_PROCESSING_REQUIRED",
                    }
                )
                return False

            response = self.kinesis_client.put_record(
                StreamName=self.stream_name,
                Data=json.dumps(payload),
                PartitionKey=conversation_id_hash,  # Same conversation -> same shard
            )

            logger.info(
                "CRISIS_EVENT_PUBLISHED",
                extra={
                    "event_id": event.event_id,
                    "conversation_id_hash": conversation_id_hash,
                    "severity": severity,
                    "shard_id": response.get("ShardId"),
                    "sequence_number": response.get("SequenceNumber"),
                }
            )
            return True

        except Exception as e:
            logger.critical(
                "CRISIS_EVENT_PUBLISH_FAILED",
                extra={
                    "event_id": event.event_id,
                    "conversation_id_hash": conversation_id_hash,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "action": "MANUAL_REVIEW_REQUIRED",
                    "payload": json.dumps(payload),
                }
            )
            return False
