"""
Interaction Log - Append-only record of every answered query.

Each query produces exactly one LogRecord, whether it was served from
the cache, answered by the model, or failed. Records are never modified
after they are appended.

Retention:
The log grows without bound by default; every record stays until the
process exits. Setting ``max_records`` keeps only the newest records.
"""
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from src.core.logging_config import get_logger

logger = get_logger(__name__)


class ResponseSource(str, Enum):
    """Where an answer came from."""
    CACHE = "CACHE"
    AI = "AI"
    ERROR = "ERROR"


class ResponseStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class ResponseCategory(str, Enum):
    """How the answer relates to the knowledge base."""
    MATCH = "MATCH"          # Answer found in the handbook
    GAP = "GAP"              # On topic, but the handbook lacks the answer
    UNRELATED = "UNRELATED"  # Not about the school


def _new_record_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class LogRecord:
    """
    One query/response pair.

    Attributes:
        query: The question as the user asked it
        response: The text returned to the user
        latency_ms: End-to-end handling time
        source: CACHE, AI or ERROR
        status: success or error
        category: MATCH, GAP or UNRELATED; None for errors
        id: Short unique id
        timestamp: When the record was created (UTC)
    """
    query: str
    response: str
    latency_ms: int
    source: ResponseSource
    status: ResponseStatus
    category: Optional[ResponseCategory] = None
    id: str = field(default_factory=_new_record_id)
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "query": self.query,
            "response": self.response,
            "latency_ms": self.latency_ms,
            "source": self.source.value,
            "status": self.status.value,
            "category": self.category.value if self.category else None,
        }


class InteractionLog:
    """
    Thread-safe append-only log of interactions.

    Example:
        >>> log = InteractionLog()
        >>> log.append(LogRecord(
        ...     query="When do you open?", response="At 7:00 AM.",
        ...     latency_ms=812, source=ResponseSource.AI,
        ...     status=ResponseStatus.SUCCESS, category=ResponseCategory.MATCH,
        ... ))
        >>> len(log.all_sorted())
        1
    """

    def __init__(self, max_records: int = 0):
        """
        Initialize the log.

        Args:
            max_records: Keep only this many newest records, 0 for unbounded
        """
        self.max_records = max(0, max_records)
        self._records: List[LogRecord] = []
        self._lock = threading.Lock()

        logger.info(
            f"InteractionLog initialized: "
            f"max_records={self.max_records or 'unbounded'}"
        )

    def append(self, record: LogRecord) -> None:
        with self._lock:
            self._records.append(record)
            if self.max_records and len(self._records) > self.max_records:
                del self._records[: len(self._records) - self.max_records]

        logger.debug(
            f"Logged interaction: source={record.source.value}, "
            f"status={record.status.value}, latency={record.latency_ms}ms"
        )

    def all_sorted(self) -> List[LogRecord]:
        """
        Snapshot of all records, newest first.

        Records with the same timestamp keep reverse append order.
        """
        with self._lock:
            snapshot = list(self._records)

        return sorted(reversed(snapshot), key=lambda r: r.timestamp, reverse=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
