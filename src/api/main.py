"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Router registration
3. Middleware configuration (audit & security headers)
4. Exception handlers
5. Startup/shutdown events

Run with: uvicorn src.api.main:app --reload
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import admin_router, chat_router, health_router
from src.api.routes.health import APP_VERSION
from src.core.audit import AuditMiddleware, SecurityHeadersMiddleware
from src.core.config import Settings, get_settings
from src.core.exceptions import FrontDeskException
from src.core.logging_config import get_logger, setup_logging
from src.services.orchestrator import FrontDeskOrchestrator


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup builds the orchestrator from settings unless one was passed
    to create_app(). All state lives in memory and is dropped on shutdown.
    """
    app_settings: Settings = app.state.settings

    logger.info(f"Starting {app_settings.app_name} in {app_settings.app_env} mode")
    logger.info(f"LLM: provider={app_settings.llm_provider}, model={app_settings.llm_model}")

    if app.state.orchestrator is None:
        app.state.orchestrator = FrontDeskOrchestrator.from_settings(app_settings)

    yield

    log_size = len(app.state.orchestrator.interaction_log)
    logger.info(f"Shutting down {app_settings.app_name}: {log_size} interactions discarded")


def _register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:

    @app.exception_handler(FrontDeskException)
    async def front_desk_exception_handler(request: Request, exc: FrontDeskException):
        """Handle all application exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict()
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies are rejected with 400, not 422."""
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body") or None
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": first.get("msg", "Invalid request"),
                "details": f"field={field}" if field else None,
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Handle uncaught exceptions globally.

        Detailed error information is only included in development mode.
        """
        logger.exception(f"Unhandled exception: {exc}")

        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred",
                "details": str(exc) if app_settings.is_development() else None,
                "timestamp": datetime.utcnow().isoformat()
            }
        )


def create_app(
    orchestrator: Optional[FrontDeskOrchestrator] = None,
    app_settings: Optional[Settings] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        orchestrator: Pre-built orchestrator; built from settings at
            startup if omitted
        app_settings: Settings override; defaults to get_settings()
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Front Desk Assistant API",
        description="""
        Answers parent and staff questions from the center's handbook.

        - **Chat**: questions answered by an LLM grounded in the handbook
        - **Admin**: interaction logs and live handbook edits
        """,
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = app_settings
    app.state.orchestrator = orchestrator

    app.add_middleware(SecurityHeadersMiddleware)

    if app_settings.enable_audit_logging:
        app.add_middleware(AuditMiddleware)

    if app_settings.is_development():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.warning("CORS configured for development (all origins allowed)")

    _register_exception_handlers(app, app_settings)

    app.include_router(health_router)
    app.include_router(chat_router)
    app.include_router(admin_router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "Front Desk Assistant API",
            "version": APP_VERSION,
            "documentation": "/docs",
            "health": "/health"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development()
    )
