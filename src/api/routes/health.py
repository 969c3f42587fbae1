"""
Health Check Routes - System health and readiness endpoints.

/health only proves the process is serving requests. /health/ready also
reports the size of the loaded knowledge base; it does not call the LLM.
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from src.api.dependencies import get_orchestrator
from src.core.logging_config import get_logger
from src.models.chat import HealthResponse
from src.services.orchestrator import FrontDeskOrchestrator

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)

APP_VERSION = "0.1.0"


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint"
)
async def health_check() -> HealthResponse:
    """Return 200 while the API is running."""
    logger.debug("Health check requested")

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint"
)
def readiness_check(
    orchestrator: FrontDeskOrchestrator = Depends(get_orchestrator)
) -> HealthResponse:
    """Ready once the handbook is loaded and the orchestrator exists."""
    logger.debug("Readiness check requested")

    counts = orchestrator.knowledge_store.counts()

    return HealthResponse(
        status="ready",
        version=APP_VERSION,
        timestamp=datetime.utcnow(),
        protocols=counts["protocols"],
        policies=counts["policies"],
    )
