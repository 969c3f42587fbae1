"""
Chat Routes - Question answering for parents and staff.

The route validates and sanitizes the question, then hands it to the
orchestrator. Model failures are not HTTP errors: the response carries
``success=false`` and a generic message, and the failure is recorded in
the interaction log.
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from src.api.dependencies import get_orchestrator
from src.core.exceptions import ValidationError
from src.core.logging_config import get_logger
from src.core.validators import validate_message
from src.models.chat import ChatRequest, ChatResponse, ErrorResponse, ResponseMetadata
from src.services.orchestrator import FrontDeskOrchestrator

logger = get_logger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid question"},
        500: {"model": ErrorResponse, "description": "Internal server error"}
    }
)


@router.post(
    "",
    response_model=ChatResponse,
    summary="Ask the front desk a question",
    description="""
    Ask a question about the center's protocols and policies.

    Repeated questions are answered from the cache until the knowledge
    base is edited. `metadata.category` tells whether the answer was found
    in the handbook (MATCH), is missing from it (GAP), or is off topic
    (UNRELATED).
    """
)
def send_message(
    request: ChatRequest,
    orchestrator: FrontDeskOrchestrator = Depends(get_orchestrator)
) -> ChatResponse:
    """Answer one question."""
    is_valid, sanitized_message, error = validate_message(request.message)
    if not is_valid:
        raise ValidationError(error, field="message")

    logger.info(f"Question received: {sanitized_message[:50]}")

    result = orchestrator.answer(sanitized_message)
    metadata = result.metadata

    return ChatResponse(
        success=result.success,
        message=result.text,
        timestamp=datetime.utcnow(),
        metadata=ResponseMetadata(
            latency_ms=metadata.latency_ms,
            model=metadata.model,
            source=metadata.source.value,
            category=metadata.category.value if metadata.category else None,
        ),
    )
