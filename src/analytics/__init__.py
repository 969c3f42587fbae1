"""
Analytics Package - Classification of model answers.

- response_classifier.py : Status tag contract and classify_response()

Example:
    >>> from src.analytics import classify_response
    >>> classify_response("Open 7-6. [STATUS: MATCH]").text
    'Open 7-6.'
"""
from src.analytics.response_classifier import (
    STATUS_TAGS,
    ClassifiedResponse,
    classify_response,
)

__all__ = [
    "STATUS_TAGS",
    "ClassifiedResponse",
    "classify_response",
]
