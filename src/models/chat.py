"""
Request and Response models for the Chat API.

These Pydantic models define the contract between client and server.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """
    Request model for the /chat endpoint.

    Attributes:
        message: The parent's or staff member's question.
    """
    message: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="The user's question",
        examples=["How much is tuition?"]
    )


class ResponseMetadata(BaseModel):
    """How an answer was produced."""
    latency_ms: int = Field(..., description="End-to-end handling time in milliseconds")
    model: str = Field(..., description="Model identifier, or 'cache-hit'")
    source: Literal["CACHE", "AI", "ERROR"]
    category: Optional[Literal["MATCH", "GAP", "UNRELATED"]] = Field(
        default=None,
        description="Relationship of the answer to the handbook; absent on error"
    )


class ChatResponse(BaseModel):
    """Response model for the /chat endpoint."""
    success: bool = Field(..., description="False when the assistant could not answer")
    message: str = Field(..., description="The assistant's answer")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="Response generation timestamp"
    )
    metadata: ResponseMetadata


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    protocols: Optional[int] = None
    policies: Optional[int] = None


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
