"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- chat.py   : Question answering
- admin.py  : Dashboard and knowledge base edits
- health.py : Health check endpoints
"""
from src.api.routes.admin import router as admin_router
from src.api.routes.chat import router as chat_router
from src.api.routes.health import router as health_router

__all__ = [
    "admin_router",
    "chat_router",
    "health_router",
]
