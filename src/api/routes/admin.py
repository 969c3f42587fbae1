"""
Admin Routes - Dashboard data and knowledge base edits.

Endpoints:
- GET    /admin                   : interaction logs + knowledge base
- POST   /admin/entries           : create an entry (merges if the id exists)
- PATCH  /admin/entries/{id}      : partial update (creates if the id is new)
- DELETE /admin/entries/{id}      : remove an entry

Every successful edit clears the response cache.
"""
from fastapi import APIRouter, Depends

from src.api.dependencies import get_orchestrator
from src.core.exceptions import EntryNotFoundError, ValidationError
from src.core.logging_config import get_logger
from src.models.admin import (
    CreateEntryRequest,
    DashboardResponse,
    KnowledgeEntryView,
    MutationResponse,
    UpdateEntryRequest,
)
from src.models.chat import ErrorResponse
from src.services.orchestrator import FrontDeskOrchestrator

logger = get_logger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request"},
        404: {"model": ErrorResponse, "description": "Entry not found"},
    }
)


def _entry_view(entry) -> KnowledgeEntryView:
    return KnowledgeEntryView(**entry.model_dump(), type=entry.entry_type)


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Logs and knowledge base for the dashboard"
)
def get_dashboard(
    orchestrator: FrontDeskOrchestrator = Depends(get_orchestrator)
) -> DashboardResponse:
    return DashboardResponse(**orchestrator.get_dashboard())


@router.post(
    "/entries",
    response_model=MutationResponse,
    summary="Create a protocol or policy"
)
def create_entry(
    request: CreateEntryRequest,
    orchestrator: FrontDeskOrchestrator = Depends(get_orchestrator)
) -> MutationResponse:
    """
    Create a new entry from ``data``.

    Uses the same upsert as PATCH: if ``data.id`` already exists the
    supplied fields are merged into it.
    """
    entry_id = request.data.get("id")
    if not entry_id:
        raise ValidationError("data.id is required", field="data.id")

    entry, created = orchestrator.upsert_entry(entry_id, request.data, entry_type=request.type)

    return MutationResponse(
        message="Entry created" if created else "Entry updated",
        entry=_entry_view(entry),
    )


@router.patch(
    "/entries/{entry_id}",
    response_model=MutationResponse,
    summary="Update a protocol or policy"
)
def update_entry(
    entry_id: str,
    request: UpdateEntryRequest,
    orchestrator: FrontDeskOrchestrator = Depends(get_orchestrator)
) -> MutationResponse:
    """Merge ``updates`` into the entry; unknown ids create a new entry."""
    entry, created = orchestrator.upsert_entry(entry_id, request.updates, entry_type=request.type)

    return MutationResponse(
        message="Entry created" if created else "Entry updated",
        entry=_entry_view(entry),
    )


@router.delete(
    "/entries/{entry_id}",
    response_model=MutationResponse,
    summary="Delete a protocol or policy"
)
def delete_entry(
    entry_id: str,
    orchestrator: FrontDeskOrchestrator = Depends(get_orchestrator)
) -> MutationResponse:
    if not orchestrator.delete_entry(entry_id):
        raise EntryNotFoundError(entry_id)

    return MutationResponse(message="Entry deleted")
