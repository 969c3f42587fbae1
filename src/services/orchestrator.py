"""
Front Desk Orchestrator - Answers questions from the handbook.

This service owns all process-lifetime state: the knowledge store, the
response cache and the interaction log. One instance is created at
startup and handed to the API layer.

Query flow:
1. Normalize the query and check the cache
2. On a hit, log it (source=CACHE) and return the cached answer
3. On a miss, render the knowledge base into the system prompt
4. Call the model once (temperature 0, no retries)
5. Read and strip the status tag, cache the cleaned answer, log it
6. If the model call fails, log an ERROR record and return a fallback

Concurrency:
The knowledge store and the cache share one lock, held only for
in-memory work and never across the model call. An answer is cached only
if the knowledge base did not change while the model was answering.
"""
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from src.analytics.response_classifier import classify_response
from src.core.config import Settings, get_settings
from src.core.exceptions import LLMError, ValidationError
from src.core.logging_config import get_logger
from src.core.validators import validate_entry_id, validate_entry_type
from src.knowledge.context import build_context
from src.knowledge.loader import load_knowledge_base
from src.knowledge.models import AnyEntry, KnowledgeBase
from src.knowledge.store import KnowledgeStore
from src.llm.client import LLMClient
from src.llm.prompts.front_desk_prompts import get_front_desk_system_prompt
from src.memory.cache import ResponseCache, normalize_query
from src.memory.interaction_log import (
    InteractionLog,
    LogRecord,
    ResponseCategory,
    ResponseSource,
    ResponseStatus,
)

logger = get_logger(__name__)

# Answers must be reproducible for the same handbook
ANSWER_TEMPERATURE = 0.0

CACHE_MODEL_ID = "cache-hit"

FALLBACK_MESSAGE = (
    "Sorry, I'm unable to answer right now. "
    "Please try again in a moment or contact the front desk directly."
)


@dataclass(frozen=True)
class QueryMetadata:
    latency_ms: int
    model: str
    source: ResponseSource
    category: Optional[ResponseCategory] = None


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of one question.

    Attributes:
        success: False only when the model call failed
        text: Answer shown to the user (fallback message on failure)
        metadata: Latency, model identifier, source and category
    """
    success: bool
    text: str
    metadata: QueryMetadata


class FrontDeskOrchestrator:
    """
    Answers questions, manages the knowledge base, and records every interaction.

    The model client is anything with a ``complete(system_instructions,
    user_prompt, temperature) -> str`` method that raises LLMError on
    failure, and a ``model_name`` attribute.

    Example:
        >>> orchestrator = FrontDeskOrchestrator(load_knowledge_base(), LLMClient())
        >>> result = orchestrator.answer("How much is tuition?")
        >>> result.metadata.category
        <ResponseCategory.MATCH: 'MATCH'>
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        model_client,
        cache_max_entries: int = 0,
        log_max_records: int = 0
    ):
        """
        Initialize the orchestrator and the state it owns.

        Args:
            knowledge_base: Bootstrap handbook
            model_client: Completion client (see class docstring)
            cache_max_entries: Response cache cap, 0 for unbounded
            log_max_records: Interaction log cap, 0 for unbounded
        """
        self._lock = threading.RLock()
        self.model_client = model_client
        self.knowledge_store = KnowledgeStore(knowledge_base, lock=self._lock)
        self.cache = ResponseCache(max_entries=cache_max_entries, lock=self._lock)
        self.interaction_log = InteractionLog(max_records=log_max_records)

        # Any knowledge change invalidates every cached answer
        self.knowledge_store.add_listener(self.cache.clear)

        logger.info(
            f"FrontDeskOrchestrator initialized: "
            f"school={self.knowledge_store.school_info.name}, "
            f"model={self.model_name}"
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, model_client=None) -> "FrontDeskOrchestrator":
        """Build an orchestrator from configuration and the bootstrap handbook."""
        settings = settings or get_settings()

        if model_client is None:
            model_client = LLMClient(settings)

        return cls(
            knowledge_base=load_knowledge_base(settings.handbook_path),
            model_client=model_client,
            cache_max_entries=settings.response_cache_max_entries,
            log_max_records=settings.interaction_log_max_records,
        )

    @property
    def model_name(self) -> str:
        return getattr(self.model_client, "model_name", "unknown")

    # ------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------

    def answer(self, query: str) -> QueryResult:
        """
        Answer a question from the cache or the model.

        Args:
            query: The user's question

        Returns:
            QueryResult. Provider failures are reported through
            ``success=False`` and a generic message, never raised.

        Raises:
            ValidationError: If the query is empty
        """
        start_time = time.time()

        cache_key = normalize_query(query or "")
        if not cache_key:
            raise ValidationError("Message cannot be empty", field="message")

        with self._lock:
            cached = self.cache.lookup(cache_key)
            if cached is None:
                version = self.knowledge_store.version
                knowledge_base = self.knowledge_store.snapshot()

        if cached is not None:
            return self._cache_hit(query, cached, start_time)

        logger.info(f"Cache miss, calling model: query={cache_key[:50]}")

        system_prompt = get_front_desk_system_prompt(
            school_name=knowledge_base.school_info.name,
            context=build_context(knowledge_base),
        )

        try:
            raw_text = self.model_client.complete(
                system_prompt,
                query,
                temperature=ANSWER_TEMPERATURE,
            )
        except LLMError as e:
            logger.error(f"Model call failed: {e}")
            return self._failure(query, start_time)
        except Exception as e:
            logger.exception(f"Unexpected error from model client: {e}")
            return self._failure(query, start_time)

        classified = classify_response(raw_text)

        with self._lock:
            if self.knowledge_store.version == version:
                self.cache.store(cache_key, classified.text)
            else:
                logger.info("Knowledge base changed during model call, answer not cached")

        latency_ms = self._elapsed_ms(start_time)
        self.interaction_log.append(LogRecord(
            query=query,
            response=classified.text,
            latency_ms=latency_ms,
            source=ResponseSource.AI,
            status=ResponseStatus.SUCCESS,
            category=classified.category,
        ))

        logger.info(
            f"Answered by model: category={classified.category.value}, "
            f"latency={latency_ms}ms, length={len(classified.text)}"
        )

        return QueryResult(
            success=True,
            text=classified.text,
            metadata=QueryMetadata(
                latency_ms=latency_ms,
                model=self.model_name,
                source=ResponseSource.AI,
                category=classified.category,
            ),
        )

    def _cache_hit(self, query: str, cached: str, start_time: float) -> QueryResult:
        latency_ms = self._elapsed_ms(start_time)

        # The cache only holds answers the model already produced
        self.interaction_log.append(LogRecord(
            query=query,
            response=cached,
            latency_ms=latency_ms,
            source=ResponseSource.CACHE,
            status=ResponseStatus.SUCCESS,
            category=ResponseCategory.MATCH,
        ))

        logger.info(f"Cache hit: latency={latency_ms}ms")

        return QueryResult(
            success=True,
            text=cached,
            metadata=QueryMetadata(
                latency_ms=latency_ms,
                model=CACHE_MODEL_ID,
                source=ResponseSource.CACHE,
                category=ResponseCategory.MATCH,
            ),
        )

    def _failure(self, query: str, start_time: float) -> QueryResult:
        latency_ms = self._elapsed_ms(start_time)

        self.interaction_log.append(LogRecord(
            query=query,
            response=FALLBACK_MESSAGE,
            latency_ms=latency_ms,
            source=ResponseSource.ERROR,
            status=ResponseStatus.ERROR,
        ))

        return QueryResult(
            success=False,
            text=FALLBACK_MESSAGE,
            metadata=QueryMetadata(
                latency_ms=latency_ms,
                model=self.model_name,
                source=ResponseSource.ERROR,
            ),
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    # ------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------

    def get_dashboard(self) -> Dict[str, Any]:
        """
        Everything the admin dashboard shows.

        Returns:
            Dict with 'logs' (newest first), 'knowledge_base' (tagged
            entries) and 'school_info'
        """
        return {
            "logs": [record.to_dict() for record in self.interaction_log.all_sorted()],
            "knowledge_base": self.knowledge_store.get_all(),
            "school_info": self.knowledge_store.school_info.model_dump(),
        }

    def upsert_entry(
        self,
        entry_id: str,
        fields: Mapping[str, Any],
        entry_type: Optional[str] = None
    ) -> Tuple[AnyEntry, bool]:
        """
        Update an entry's fields, or create it if the id is new.

        Clears the response cache.

        Returns:
            Tuple of (resulting entry, created)

        Raises:
            ValidationError: If the id, type or fields are unusable
        """
        is_valid, entry_id, error = validate_entry_id(entry_id)
        if not is_valid:
            raise ValidationError(error, field="id")

        is_valid, error = validate_entry_type(entry_type)
        if not is_valid:
            raise ValidationError(error, field="type")

        if not isinstance(fields, Mapping):
            raise ValidationError("Entry fields must be an object", field="updates")

        return self.knowledge_store.upsert(entry_id, fields, variant_hint=entry_type)

    def delete_entry(self, entry_id: str) -> bool:
        """
        Delete an entry. Clears the response cache only if something was removed.

        Returns:
            True if the entry existed
        """
        is_valid, entry_id, error = validate_entry_id(entry_id)
        if not is_valid:
            raise ValidationError(error, field="id")

        return self.knowledge_store.delete(entry_id)
