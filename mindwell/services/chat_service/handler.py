"""Chat Service HTTP handler.

Thin JSON boundary over ChatOrchestrator. Maps the error taxonomy to
status codes and never shows provider internals to the student:

- ValidationError -> 400 with every violated constraint
- ConversationEndedError -> 400
- CompletionServiceError -> 503 "temporarily unavailable"
- anything else -> 500 (detail only when DEBUG=true)
"""
import logging
import os
from datetime import datetime

from flask import Flask, jsonify, request

from mindwell.shared.errors import (
    CompletionServiceError,
    ConversationEndedError,
    ValidationError,
)
from mindwell.shared.utils import configure_pii_salt
from mindwell.services.llm_service import create_llm
from mindwell.services.safety_service import (
    CrisisClassifier,
    CrisisEventPublisher,
    SafetyConfig,
    get_crisis_resources,
)
from .config import SWEEP_MODE_BACKGROUND, SWEEP_MODE_ON_HEALTH, ChatServiceConfig
from .orchestrator import ChatOrchestrator
from .store import ConversationStore, ConversationSweeper

logger = logging.getLogger(__name__)

SERVICE_NAME = "MindWell AI Chatbot"
SERVICE_VERSION = "1.0.0"

app = Flask(__name__)

pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

config = ChatServiceConfig.from_env()

store = ConversationStore(ttl=config.conversation_ttl)
orchestrator = ChatOrchestrator(
    store=store,
    llm=create_llm(config.llm_config()),
    classifier=CrisisClassifier(
        config=SafetyConfig(pattern_version=os.getenv("PATTERN_VERSION", SafetyConfig.pattern_version)),
    ),
    crisis_publisher=CrisisEventPublisher(
        stream_name=config.kinesis_stream_name,
        enabled=config.crisis_publishing_enabled,
    ),
    max_message_length=config.max_message_length,
)
sweeper = ConversationSweeper(store, interval_seconds=config.sweep_interval_seconds)


@app.route("/api", methods=["GET"])
def index():
    """Service index."""
    return jsonify({
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "endpoints": {
            "chat": "POST /api/chat",
            "end_conversation": "POST /api/chat/<conversation_id>/end",
            "delete_conversation": "DELETE /api/chat/<conversation_id>",
            "health": "GET /api/health",
            "crisis_resources": "GET /api/crisis-resources",
        },
    }), 200


@app.route("/api/health", methods=["GET"])
def health():
    """Health check with conversation statistics.

    In on_health sweep mode this is also where expired conversations
    are reclaimed, since no background timer survives between requests.
    """
    try:
        if config.sweep_mode == SWEEP_MODE_ON_HEALTH:
            orchestrator.run_maintenance()

        return jsonify({
            "status": "healthy",
            "service": SERVICE_NAME,
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "environment": config.environment,
            "version": SERVICE_VERSION,
            "dependencies": {
                "groq_api": "configured" if orchestrator.llm.is_configured else "missing",
                "conversations": orchestrator.stats().to_dict(),
            },
        }), 200

    except Exception as e:
        logger.error(
            "HEALTH_CHECK_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        return jsonify({
            "status": "unhealthy",
            "service": SERVICE_NAME,
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "error": "Health check failed",
        }), 500


@app.route("/api/chat", methods=["POST"])
def chat():
    """Send one chat message.

    Request Body:
        {
            "message": "Student message text",
            "conversation_id": "uuid" (optional, generated when absent),
            "role": "user" | "system" (optional, default "user")
        }

    Response:
        {
            "response": "Model reply",
            "conversation_id": "uuid",
            "crisis_detected": true (only when detected),
            "crisis_severity": "moderate" | "high" (only when detected)
        }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({
            "error": "Invalid request",
            "details": ["Request body must be a JSON object"],
        }), 400

    try:
        result = orchestrator.handle_turn(
            conversation_id=data.get("conversation_id"),
            role=data.get("role"),
            message=data.get("message"),
        )
        return jsonify(result.to_response()), 200

    except ValidationError as e:
        return jsonify({"error": "Invalid request", "details": e.errors}), 400

    except ConversationEndedError as e:
        return jsonify({"error": "Conversation ended", "message": str(e)}), 400

    except CompletionServiceError as e:
        logger.error("CHAT_SERVICE_UNAVAILABLE", extra={"error": str(e)})
        return jsonify({
            "error": "AI service temporarily unavailable",
            "message": "Please try again in a moment",
        }), 503

    except Exception as e:
        logger.exception(
            "CHAT_UNEXPECTED_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        body = {
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again.",
        }
        if config.debug:
            body["detail"] = f"{type(e).__name__}: {e}"
        return jsonify(body), 500


@app.route("/api/chat/<conversation_id>/end", methods=["POST"])
def end_conversation(conversation_id: str):
    """End a conversation. Later messages to it are rejected."""
    if not orchestrator.end_conversation(conversation_id):
        return jsonify({"error": "Conversation not found"}), 404
    return jsonify({"conversation_id": conversation_id, "active": False}), 200


@app.route("/api/chat/<conversation_id>", methods=["DELETE"])
def delete_conversation(conversation_id: str):
    """Forget a conversation entirely."""
    if not orchestrator.delete_conversation(conversation_id):
        return jsonify({"error": "Conversation not found"}), 404
    return jsonify({"conversation_id": conversation_id, "deleted": True}), 200


@app.route("/api/crisis-resources", methods=["GET"])
def crisis_resources():
    """Static crisis resources for the front-end."""
    return jsonify(get_crisis_resources()), 200


@app.errorhandler(404)
def not_found(error):
    return jsonify({"error": "Not found"}), 404


@app.errorhandler(405)
def method_not_allowed(error):
    return jsonify({
        "error": "Method not allowed",
        "message": f"{request.method} is not supported for {request.path}",
    }), 405


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.sweep_mode == SWEEP_MODE_BACKGROUND:
        sweeper.start()

    app.run(host="0.0.0.0", port=config.port, debug=config.debug)
