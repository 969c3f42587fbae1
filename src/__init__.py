"""
Source code root package.

This package contains all application source code organized by responsibility:
- api/       : FastAPI routes and HTTP handling
- core/      : Configuration, logging, errors and input validation
- services/  : The front desk orchestrator
- knowledge/ : Handbook models, store, loader and context rendering
- memory/    : Response cache and interaction log
- llm/       : LLM client and prompts
- analytics/ : Status tag classification of model answers
- models/    : Pydantic models for request/response schemas
"""
