"""
Input Validators - Sanitization and validation utilities.

This module validates what the transport hands to the orchestrator:
- Question text sanitization
- Knowledge entry id format
- Entry type names
"""
import re
from typing import Optional, Tuple

from src.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 2000
MAX_ENTRY_ID_LENGTH = 128

ENTRY_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.:-]+$")

VALID_ENTRY_TYPES = {"protocol", "policy"}


def sanitize_message(message: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """
    Sanitize a user message.

    - Strips leading/trailing whitespace
    - Removes null bytes
    - Limits length

    Inner whitespace is left alone; the model sees the question as typed.

    Args:
        message: Raw user message
        max_length: Maximum allowed length

    Returns:
        Sanitized message
    """
    if not message:
        return ""

    cleaned = message.replace("\x00", "")
    cleaned = cleaned.strip()

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    return cleaned


def validate_message(message: str) -> Tuple[bool, str, Optional[str]]:
    """
    Full validation and sanitization of a question.

    Args:
        message: Raw user message

    Returns:
        Tuple of (is_valid, sanitized_message, error_message)
    """
    if not message or not message.strip():
        return False, "", "Message cannot be empty"

    if len(message.strip()) > MAX_MESSAGE_LENGTH:
        return False, "", f"Message too long (max {MAX_MESSAGE_LENGTH} characters)"

    sanitized = sanitize_message(message)

    if not sanitized:
        return False, "", "Message cannot be empty after sanitization"

    return True, sanitized, None


def validate_entry_id(entry_id: Optional[str]) -> Tuple[bool, str, Optional[str]]:
    """
    Validate a knowledge entry id.

    Args:
        entry_id: Raw id from the request

    Returns:
        Tuple of (is_valid, trimmed_id, error_message)
    """
    if entry_id is None or not str(entry_id).strip():
        return False, "", "Entry id cannot be empty"

    trimmed = str(entry_id).strip()

    if len(trimmed) > MAX_ENTRY_ID_LENGTH:
        return False, "", f"Entry id too long (max {MAX_ENTRY_ID_LENGTH} characters)"

    if not ENTRY_ID_PATTERN.match(trimmed):
        logger.warning(f"Rejected entry id: {trimmed[:50]}")
        return False, "", "Entry id may only contain letters, digits, '_', '.', ':' and '-'"

    return True, trimmed, None


def validate_entry_type(entry_type: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate an entry type name.

    None is accepted; the store then falls back to 'policy'.

    Args:
        entry_type: 'protocol', 'policy' or None

    Returns:
        Tuple of (is_valid, error_message)
    """
    if entry_type is None:
        return True, None

    if entry_type not in VALID_ENTRY_TYPES:
        return False, f"Invalid type: {entry_type}. Must be one of: {sorted(VALID_ENTRY_TYPES)}"

    return True, None
