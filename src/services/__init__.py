"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- Orchestrate between the knowledge store, cache, log and LLM
"""
from src.services.orchestrator import (
    CACHE_MODEL_ID,
    FALLBACK_MESSAGE,
    FrontDeskOrchestrator,
    QueryMetadata,
    QueryResult,
)

__all__ = [
    "CACHE_MODEL_ID",
    "FALLBACK_MESSAGE",
    "FrontDeskOrchestrator",
    "QueryMetadata",
    "QueryResult",
]
