"""
Models module - Pydantic schemas for the HTTP layer.

This module defines:
- chat.py  : Question/answer request and response models
- admin.py : Dashboard and knowledge base mutation models
"""
from src.models.admin import (
    CreateEntryRequest,
    DashboardResponse,
    KnowledgeEntryView,
    LogRecordView,
    MutationResponse,
    UpdateEntryRequest,
)
from src.models.chat import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    ResponseMetadata,
)

__all__ = [
    "CreateEntryRequest",
    "DashboardResponse",
    "KnowledgeEntryView",
    "LogRecordView",
    "MutationResponse",
    "UpdateEntryRequest",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
    "ResponseMetadata",
]
