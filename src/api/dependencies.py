"""
API Dependencies - Access to the orchestrator owned by the application.

The orchestrator is created once per application (see create_app) and
stored on ``app.state``; routes receive it through FastAPI's dependency
injection instead of a module-level singleton.
"""
from fastapi import Request

from src.services.orchestrator import FrontDeskOrchestrator


def get_orchestrator(request: Request) -> FrontDeskOrchestrator:
    """Return the orchestrator attached to the running application."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise RuntimeError("Orchestrator is not initialized")
    return orchestrator
