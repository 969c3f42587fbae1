import os

# Settings are read at import time by src.api.main
os.environ.setdefault("LLM_PROVIDER", "groq")
os.environ.setdefault("GROQ_API_KEY", "test-key")
os.environ.setdefault("APP_ENV", "development")

import pytest
from fastapi.testclient import TestClient

from src.core.exceptions import LLMError
from src.knowledge.models import KnowledgeBase, Policy, Protocol, SchoolInfo
from src.services.orchestrator import FrontDeskOrchestrator


class FakeModelClient:
    """Scripted stand-in for LLMClient that records every call."""

    model_name = "fake-model"

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def complete(self, system_instructions, user_prompt, temperature=0.0):
        self.calls.append({
            "system": system_instructions,
            "prompt": user_prompt,
            "temperature": temperature,
        })
        if self.error is not None:
            raise self.error
        if not self.responses:
            return "Default answer. [STATUS: MATCH]"
        return self.responses.pop(0)


@pytest.fixture
def knowledge_base():
    return KnowledgeBase(
        school_info=SchoolInfo(name="Sunny Days Childcare"),
        protocols=[
            Protocol(
                id="proto-fever",
                topic="Fever",
                content="Children with a fever of 100.4F go home.",
                display_source="Health Handbook p.2",
                operator_action="Advise keeping the child home.",
                urgency="high",
            ),
            Protocol(
                id="proto-closure",
                topic="Weather Closures",
                content="We follow the district closure decisions.",
                display_source="Parent Handbook p.11",
                operator_action="Point to the text alert.",
            ),
        ],
        policies=[
            Policy(
                id="p1",
                topic="Tuition",
                content="Tuition is $1200/month.",
                display_source="Handbook p.4",
                operator_action="Quote the amount exactly.",
            ),
        ],
    )


@pytest.fixture
def fake_model():
    return FakeModelClient()


@pytest.fixture
def orchestrator(knowledge_base, fake_model):
    return FrontDeskOrchestrator(knowledge_base, fake_model)


@pytest.fixture
def client(orchestrator):
    from src.api.main import create_app
    return TestClient(create_app(orchestrator=orchestrator))


@pytest.fixture
def failing_model():
    return FakeModelClient(error=LLMError("groq request failed: 503 Service Unavailable"))
