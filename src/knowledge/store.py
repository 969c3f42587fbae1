"""
Knowledge Store - In-memory protocols and policies.

The store owns the mutable knowledge base for the lifetime of the
process. Entries are immutable pydantic models; an edit replaces the
entry at the same list position, so readers holding a snapshot never
observe a half-applied change.

Every successful mutation bumps ``version`` and notifies registered
listeners (the orchestrator registers the response cache's ``clear``).
"""
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from src.core.exceptions import ValidationError
from src.core.logging_config import get_logger
from src.knowledge.models import (
    ENTRY_MODELS,
    POLICY,
    PROTOCOL,
    UPDATE_MODELS,
    AnyEntry,
    EntryType,
    KnowledgeBase,
    SchoolInfo,
)

logger = get_logger(__name__)

# Keys the admin UI sends alongside entry fields; never merged
_NON_FIELD_KEYS = ("id", "type")


def _describe_errors(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ())) or "payload"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


class KnowledgeStore:
    """
    Mutable collection of protocols and policies plus school metadata.

    Example:
        >>> store = KnowledgeStore(load_knowledge_base())
        >>> store.upsert("p1", {"content": "Tuition is $1300/month."})
        >>> store.delete("p1")
        True
    """

    def __init__(self, knowledge_base: KnowledgeBase, lock=None):
        """
        Initialize the store from a bootstrap knowledge base.

        Args:
            knowledge_base: Initial school info, protocols and policies
            lock: Lock to share with other state that must change together
                with the knowledge base. A private RLock is used if omitted.
        """
        self._school_info = knowledge_base.school_info
        self._protocols: List[AnyEntry] = list(knowledge_base.protocols)
        self._policies: List[AnyEntry] = list(knowledge_base.policies)
        self._lock = lock if lock is not None else threading.RLock()
        self._listeners: List[Callable[[], None]] = []
        self.version = 0

        logger.info(
            f"KnowledgeStore initialized: school={self._school_info.name}, "
            f"protocols={len(self._protocols)}, policies={len(self._policies)}"
        )

    @property
    def school_info(self) -> SchoolInfo:
        return self._school_info

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback invoked after every successful mutation."""
        self._listeners.append(callback)

    def get(self, entry_id: str) -> Optional[AnyEntry]:
        """Return the entry with this id, or None."""
        with self._lock:
            found = self._locate(entry_id)
            return found[0][found[1]] if found else None

    def get_all(self) -> List[Dict[str, Any]]:
        """
        List every entry tagged with its type.

        Protocols come first, then policies, each in list order.
        """
        with self._lock:
            return [
                {**entry.model_dump(), "type": PROTOCOL} for entry in self._protocols
            ] + [
                {**entry.model_dump(), "type": POLICY} for entry in self._policies
            ]

    def snapshot(self) -> KnowledgeBase:
        """Return an immutable view of the current knowledge base."""
        with self._lock:
            return KnowledgeBase.model_construct(
                school_info=self._school_info,
                protocols=list(self._protocols),
                policies=list(self._policies),
            )

    def counts(self) -> Dict[str, int]:
        with self._lock:
            return {"protocols": len(self._protocols), "policies": len(self._policies)}

    def upsert(
        self,
        entry_id: str,
        fields: Mapping[str, Any],
        variant_hint: Optional[EntryType] = None
    ) -> Tuple[AnyEntry, bool]:
        """
        Merge fields into an existing entry, or insert a new one.

        An existing id keeps its type and position; only the supplied
        fields change. An unknown id is inserted at the front of the
        protocol list when ``variant_hint`` is 'protocol', otherwise at
        the front of the policy list.

        Args:
            entry_id: Entry identifier
            fields: Partial entry fields
            variant_hint: 'protocol' or 'policy' for new entries. Falls back
                to ``fields['type']`` and then to 'policy'.

        Returns:
            Tuple of (resulting entry, created)

        Raises:
            ValidationError: If the fields are unusable. State is unchanged.
        """
        if not entry_id:
            raise ValidationError("Entry id cannot be empty", field="id")

        if variant_hint is None:
            variant_hint = fields.get("type") or POLICY
        if not isinstance(variant_hint, str) or variant_hint not in ENTRY_MODELS:
            raise ValidationError(f"Unknown entry type: {variant_hint!r}", field="type")

        changes = {k: v for k, v in fields.items() if k not in _NON_FIELD_KEYS}

        with self._lock:
            found = self._locate(entry_id)

            if found:
                entries, index = found
                current = entries[index]
                entry = self._merge(current, changes)
                entries[index] = entry
                created = False
                logger.info(f"Updated {current.entry_type} '{entry_id}': fields={sorted(changes)}")
            else:
                entry = self._build(entry_id, variant_hint, changes)
                target = self._protocols if variant_hint == PROTOCOL else self._policies
                target.insert(0, entry)
                created = True
                logger.info(f"Created {variant_hint} '{entry_id}'")

            self._changed()
            return entry, created

    def delete(self, entry_id: str) -> bool:
        """
        Remove an entry from whichever list holds it.

        Returns:
            True if an entry was removed, False if the id is unknown
        """
        with self._lock:
            found = self._locate(entry_id)
            if not found:
                logger.info(f"Delete ignored, no entry '{entry_id}'")
                return False

            entries, index = found
            removed = entries.pop(index)
            logger.info(f"Deleted {removed.entry_type} '{entry_id}'")

            self._changed()
            return True

    def _locate(self, entry_id: str) -> Optional[Tuple[List[AnyEntry], int]]:
        for entries in (self._protocols, self._policies):
            for index, entry in enumerate(entries):
                if entry.id == entry_id:
                    return entries, index
        return None

    def _merge(self, current: AnyEntry, changes: Dict[str, Any]) -> AnyEntry:
        entry_type = current.entry_type

        # The admin UI edits both types with one form; a policy has no urgency
        if entry_type == POLICY and "urgency" in changes:
            logger.debug(f"Ignoring urgency on policy '{current.id}'")
            changes = {k: v for k, v in changes.items() if k != "urgency"}

        try:
            update = UPDATE_MODELS[entry_type].model_validate(changes)
            merged = {**current.model_dump(), **update.model_dump(exclude_unset=True)}
            return ENTRY_MODELS[entry_type].model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid update for '{current.id}': {_describe_errors(e)}") from e

    def _build(self, entry_id: str, entry_type: EntryType, changes: Dict[str, Any]) -> AnyEntry:
        if entry_type == POLICY:
            changes = {k: v for k, v in changes.items() if k != "urgency"}

        try:
            return ENTRY_MODELS[entry_type].model_validate({**changes, "id": entry_id})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid new {entry_type} '{entry_id}': {_describe_errors(e)}") from e

    def _changed(self) -> None:
        self.version += 1
        for callback in self._listeners:
            callback()
