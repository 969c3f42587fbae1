"""
Handbook Loader - Bootstrap the knowledge base from JSON.

The handbook is read once at startup. Its layout is:

    {
      "school_info": {"name": "...", ...},
      "protocols": [{"id": ..., "topic": ..., "content": ..., "urgency": ...}],
      "policies":  [{"id": ..., "topic": ..., "content": ...}]
    }

Entries may carry a "type" key (as exported by the admin dashboard);
it is dropped on load since the list already determines the type.
"""
import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from src.core.logging_config import get_logger
from src.knowledge.models import KnowledgeBase

logger = get_logger(__name__)

DEFAULT_HANDBOOK_PATH = Path(__file__).parent / "data" / "handbook.json"


class HandbookLoadError(Exception):
    """Raised when the bootstrap handbook cannot be read or is invalid."""
    pass


def _strip_type(entries: Any) -> Any:
    if not isinstance(entries, list):
        return entries
    return [
        {k: v for k, v in entry.items() if k != "type"} if isinstance(entry, dict) else entry
        for entry in entries
    ]


def parse_knowledge_base(data: Dict[str, Any]) -> KnowledgeBase:
    """
    Validate raw handbook data into a KnowledgeBase.

    Raises:
        HandbookLoadError: If required fields are missing, types are wrong,
            or an id appears more than once
    """
    if not isinstance(data, dict):
        raise HandbookLoadError("Handbook must be a JSON object")

    payload = dict(data)
    for key in ("protocols", "policies"):
        if key in payload:
            payload[key] = _strip_type(payload[key])

    try:
        return KnowledgeBase.model_validate(payload)
    except PydanticValidationError as e:
        raise HandbookLoadError(f"Invalid handbook: {e}") from e


def load_knowledge_base(path: Optional[Path] = None) -> KnowledgeBase:
    """
    Load the bootstrap knowledge base.

    Args:
        path: Handbook JSON file. Defaults to the bundled sample handbook.

    Returns:
        Validated KnowledgeBase

    Raises:
        HandbookLoadError: If the file is missing, not JSON, or invalid
    """
    path = Path(path) if path else DEFAULT_HANDBOOK_PATH

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise HandbookLoadError(f"Handbook not found: {path}") from e
    except json.JSONDecodeError as e:
        raise HandbookLoadError(f"Handbook is not valid JSON: {path}: {e}") from e

    knowledge_base = parse_knowledge_base(data)

    logger.info(
        f"Loaded handbook from {path}: "
        f"{len(knowledge_base.protocols)} protocols, "
        f"{len(knowledge_base.policies)} policies"
    )
    return knowledge_base
