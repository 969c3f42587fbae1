"""
Response Classifier - Read the status tag the model appends to answers.

The system prompt asks the model to end every answer with exactly one
literal tag:

    [STATUS: MATCH]      answer found in the handbook
    [STATUS: GAP]        about the school, but the handbook has no answer
    [STATUS: UNRELATED]  not about the school

These literal strings are a contract between the prompt and this module.
classify_response() is the only place that parses them.

When no tag is present the answer is classified as MATCH. This is
permissive and can hide GAP or UNRELATED answers from the dashboard.
"""
import re
from dataclasses import dataclass
from typing import Dict

from src.memory.interaction_log import ResponseCategory

STATUS_TAGS: Dict[ResponseCategory, str] = {
    category: f"[STATUS: {category.value}]" for category in ResponseCategory
}

# Checked in this order; the first tag present wins
_PRECEDENCE = (ResponseCategory.GAP, ResponseCategory.UNRELATED)

_ANY_STATUS_TAG = re.compile(r"\[STATUS: (.*?)\]")


@dataclass(frozen=True)
class ClassifiedResponse:
    """Model output with status tags removed."""
    text: str
    category: ResponseCategory


def classify_response(raw_text: str) -> ClassifiedResponse:
    """
    Detect the category and strip every status tag.

    Example:
        >>> result = classify_response("We don't list that. [STATUS: GAP]")
        >>> result.category, result.text
        (<ResponseCategory.GAP: 'GAP'>, "We don't list that.")
    """
    category = ResponseCategory.MATCH
    for candidate in _PRECEDENCE:
        if STATUS_TAGS[candidate] in raw_text:
            category = candidate
            break

    cleaned = _ANY_STATUS_TAG.sub("", raw_text).strip()
    return ClassifiedResponse(text=cleaned, category=category)
