"""
LLM module - Language model integration.

- client.py  : LLMClient, one completion call per question
- prompts/   : System prompt construction
"""
from src.core.exceptions import LLMError
from src.llm.client import LLMClient

__all__ = [
    "LLMClient",
    "LLMError",
]
