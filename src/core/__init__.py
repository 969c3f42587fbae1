"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Error hierarchy mapped to HTTP responses
- validators.py     : Input sanitization
"""
from src.core.config import get_settings, Settings
from src.core.logging_config import setup_logging, get_logger
from src.core.exceptions import (
    FrontDeskException,
    ValidationError,
    EntryNotFoundError,
    LLMError,
)

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "FrontDeskException",
    "ValidationError",
    "EntryNotFoundError",
    "LLMError",
]
