"""
Response Cache - Previously produced answers keyed by normalized query.

The cache exists so a repeated question gets the same grounded answer
without another model call. It is a correctness mechanism, not a tuned
performance cache: there is no TTL, and the whole cache is cleared
whenever the knowledge base changes, so it never serves an answer built
from knowledge that has since been edited.

Size is unbounded unless ``max_entries`` is set, in which case the
oldest stored answer is evicted first.
"""
import threading
from collections import OrderedDict
from typing import Optional

from src.core.logging_config import get_logger

logger = get_logger(__name__)


def normalize_query(query: str) -> str:
    """Cache key for a query: trimmed and case-folded."""
    return query.strip().lower()


class ResponseCache:
    """
    Maps normalized queries to final answer text.

    Example:
        >>> cache = ResponseCache()
        >>> cache.store("how much is tuition?", "Tuition is $1200/month.")
        >>> cache.lookup("how much is tuition?")
        'Tuition is $1200/month.'
        >>> cache.clear()
        >>> cache.lookup("how much is tuition?") is None
        True
    """

    def __init__(self, max_entries: int = 0, lock=None):
        """
        Initialize the cache.

        Args:
            max_entries: Maximum cached answers, 0 for unbounded
            lock: Lock shared with the knowledge store so a lookup can
                never interleave with a knowledge mutation
        """
        self.max_entries = max(0, max_entries)
        self._entries: "OrderedDict[str, str]" = OrderedDict()
        self._lock = lock if lock is not None else threading.RLock()

        logger.info(
            f"ResponseCache initialized: "
            f"max_entries={self.max_entries or 'unbounded'}"
        )

    def lookup(self, normalized_query: str) -> Optional[str]:
        with self._lock:
            return self._entries.get(normalized_query)

    def store(self, normalized_query: str, answer: str) -> None:
        with self._lock:
            self._entries[normalized_query] = answer
            self._entries.move_to_end(normalized_query)

            if self.max_entries and len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Cache full, evicted: {evicted[:50]}")

    def clear(self) -> int:
        """
        Drop every cached answer.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()

        if count:
            logger.info(f"Response cache cleared: {count} entries")
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, normalized_query: str) -> bool:
        with self._lock:
            return normalized_query in self._entries
