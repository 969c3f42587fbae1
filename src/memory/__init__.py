"""
Memory Package - Process-lifetime state for the orchestrator.

- cache.py           : ResponseCache, answers keyed by normalized query
- interaction_log.py : InteractionLog, append-only query/response records

Nothing here persists across restarts.
"""
from src.memory.cache import ResponseCache, normalize_query
from src.memory.interaction_log import (
    InteractionLog,
    LogRecord,
    ResponseCategory,
    ResponseSource,
    ResponseStatus,
)

__all__ = [
    "ResponseCache",
    "normalize_query",
    "InteractionLog",
    "LogRecord",
    "ResponseCategory",
    "ResponseSource",
    "ResponseStatus",
]
