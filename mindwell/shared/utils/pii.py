"""Identifier and message hashing for logs and events.

Conversation ids are bearer handles: anyone holding one can read and
continue the conversation. Message text is student disclosure. Neither
may appear raw in application logs or published events.

Two entry points for ids:
- hash_pii(): strict, raises when no salt is configured.
- log_id(): for log lines and crisis events emitted by the chat core.
  Never raises; without a salt it returns UNSALTED_ID so a logging
  call cannot abort a turn that has already mutated state.
"""
import hashlib
import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)

MIN_SALT_LENGTH = 32

# Emitted in place of a hash when no salt is configured
UNSALTED_ID = "unsalted"

_salt: Optional[str] = None
_unsalted_warned = False
_state_lock = threading.Lock()


def configure_pii_salt(salt: str) -> None:
    """Set the process-wide hashing salt.

    Call once at startup, before the first request is served.

    Raises:
        ValueError: If salt is empty or shorter than MIN_SALT_LENGTH
    """
    global _salt, _unsalted_warned
    if not salt or len(salt) < MIN_SALT_LENGTH:
        logger.critical(
            "PII_SALT_REJECTED",
            extra={"salt_length": len(salt or ""), "min_length": MIN_SALT_LENGTH}
        )
        raise ValueError(f"PII salt must be at least {MIN_SALT_LENGTH} characters")

    with _state_lock:
        _salt = salt
        _unsalted_warned = False
    logger.info("PII_SALT_CONFIGURED", extra={"salt_length": len(salt)})


def reset_pii_salt() -> None:
    """Forget the configured salt. Used by tests."""
    global _salt, _unsalted_warned
    with _state_lock:
        _salt = None
        _unsalted_warned = False


def is_pii_salt_configured() -> bool:
    return _salt is not None


def _digest(salt: str, value: str) -> str:
    return hashlib.sha256(f"{salt}{value}".encode()).hexdigest()


def hash_pii(value: str) -> str:
    """Salted SHA-256 of an identifier.

    The same conversation id maps to the same hash for the lifetime of
    a deployment's salt, so log lines and events can be correlated.

    Raises:
        RuntimeError: If the salt has not been configured
    """
    salt = _salt
    if salt is None:
        raise RuntimeError("PII salt not configured. Call configure_pii_salt() first.")
    return _digest(salt, str(value))


def log_id(value: str) -> str:
    """Hash an identifier for a log line, or UNSALTED_ID without a salt."""
    global _unsalted_warned
    if is_pii_salt_configured():
        return hash_pii(value)

    with _state_lock:
        warn = not _unsalted_warned
        _unsalted_warned = True
    if warn:
        logger.warning(
            "PII_SALT_MISSING",
            extra={"action": "call configure_pii_salt() at startup"}
        )
    return UNSALTED_ID


def hash_text_for_audit(text: str) -> str:
    """Fingerprint message text without exposing its content."""
    return hashlib.sha256(text.encode()).hexdigest()
