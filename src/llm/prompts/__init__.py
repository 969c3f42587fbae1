"""
Prompts module - LLM prompt templates.

Prompts live in their own files so wording changes are easy to review.
"""
from src.llm.prompts.front_desk_prompts import get_front_desk_system_prompt

__all__ = [
    "get_front_desk_system_prompt",
]
