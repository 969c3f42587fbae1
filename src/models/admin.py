"""
Request and Response models for the Admin API.

Entry fields are accepted as a free-form object here and validated by
the knowledge store against the entry's type, since a partial update's
schema depends on whether the id belongs to a protocol or a policy.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class LogRecordView(BaseModel):
    id: str
    timestamp: datetime
    query: str
    response: str
    latency_ms: int
    source: Literal["CACHE", "AI", "ERROR"]
    status: Literal["success", "error"]
    category: Optional[Literal["MATCH", "GAP", "UNRELATED"]] = None


class KnowledgeEntryView(BaseModel):
    id: str
    type: Literal["protocol", "policy"]
    topic: str
    content: str
    display_source: str = ""
    operator_action: str = ""
    urgency: Optional[Literal["high", "medium", "low"]] = None


class DashboardResponse(BaseModel):
    """Everything the admin dashboard shows."""
    logs: List[LogRecordView]
    knowledge_base: List[KnowledgeEntryView]
    school_info: Dict[str, Any]


class CreateEntryRequest(BaseModel):
    """
    Body for POST /admin/entries.

    ``data`` must include the id. If the id already exists the fields
    are merged into that entry instead.
    """
    type: Optional[Literal["protocol", "policy"]] = Field(
        default=None,
        description="Entry type for a new id; defaults to 'policy'"
    )
    data: Dict[str, Any] = Field(
        ...,
        examples=[{
            "id": "pol-tuition",
            "topic": "Tuition",
            "content": "Tuition is $1200/month.",
            "display_source": "Handbook p.4",
            "operator_action": "Quote the amount exactly.",
        }]
    )


class UpdateEntryRequest(BaseModel):
    """Body for PATCH /admin/entries/{entry_id}."""
    type: Optional[Literal["protocol", "policy"]] = Field(
        default=None,
        description="Entry type used only if the id does not exist yet"
    )
    updates: Dict[str, Any] = Field(
        ...,
        examples=[{"content": "Tuition is $1300/month."}]
    )


class MutationResponse(BaseModel):
    success: bool = True
    message: str
    entry: Optional[KnowledgeEntryView] = None
