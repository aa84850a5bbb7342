"""Shared utilities for MindWell services."""
from .pii import (
    UNSALTED_ID,
    configure_pii_salt,
    hash_pii,
    hash_text_for_audit,
    is_pii_salt_configured,
    log_id,
    reset_pii_salt,
)

__all__ = [
    "UNSALTED_ID",
    "configure_pii_salt",
    "hash_pii",
    "hash_text_for_audit",
    "is_pii_salt_configured",
    "log_id",
    "reset_pii_salt",
]
