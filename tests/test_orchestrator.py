import threading

import pytest

from src.core.exceptions import ValidationError
from src.memory.interaction_log import ResponseCategory, ResponseSource, ResponseStatus
from src.services.orchestrator import (
    CACHE_MODEL_ID,
    FALLBACK_MESSAGE,
    FrontDeskOrchestrator,
)
from tests.conftest import FakeModelClient


def test_first_query_calls_model_and_second_is_served_from_cache(orchestrator, fake_model):
    fake_model.responses = ["Tuition is $1200/month. (Handbook p.4)\n[STATUS: MATCH]"]

    first = orchestrator.answer("How much is tuition?")
    second = orchestrator.answer("How much is tuition?")

    assert len(fake_model.calls) == 1
    assert first.success and second.success
    assert first.text == "Tuition is $1200/month. (Handbook p.4)"
    assert second.text == first.text
    assert first.metadata.source == ResponseSource.AI
    assert first.metadata.model == "fake-model"
    assert second.metadata.source == ResponseSource.CACHE
    assert second.metadata.model == CACHE_MODEL_ID
    assert second.metadata.category == ResponseCategory.MATCH

    newest, oldest = orchestrator.interaction_log.all_sorted()[:2]
    assert {newest.source, oldest.source} == {ResponseSource.AI, ResponseSource.CACHE}


def test_cache_key_is_normalized(orchestrator, fake_model):
    orchestrator.answer("How much is tuition?")
    result = orchestrator.answer("  HOW MUCH IS TUITION?  ")

    assert len(fake_model.calls) == 1
    assert result.metadata.source == ResponseSource.CACHE


def test_model_receives_raw_query_context_and_zero_temperature(orchestrator, fake_model):
    orchestrator.answer("  How much is tuition?")

    call = fake_model.calls[0]
    assert call["prompt"] == "  How much is tuition?"
    assert call["temperature"] == 0.0
    assert "You are the AI Front Desk for Sunny Days Childcare." in call["system"]
    assert "CURRENT TIME:" in call["system"]
    assert "[STATUS: GAP]" in call["system"]
    assert 'CONTENT: "Tuition is $1200/month."' in call["system"]


def test_gap_tag_is_stripped_and_only_clean_text_cached(orchestrator, fake_model):
    fake_model.responses = ["We don't list summer camp dates.\n[STATUS: GAP]"]

    result = orchestrator.answer("When is summer camp?")

    assert result.metadata.category == ResponseCategory.GAP
    assert result.text == "We don't list summer camp dates."
    assert orchestrator.cache.lookup("when is summer camp?") == "We don't list summer camp dates."

    record = orchestrator.interaction_log.all_sorted()[0]
    assert record.category == ResponseCategory.GAP
    assert record.status == ResponseStatus.SUCCESS


def test_upsert_invalidates_cache_so_next_query_calls_model(orchestrator, fake_model):
    fake_model.responses = [
        "Tuition is $1200/month. [STATUS: MATCH]",
        "Tuition is $1300/month. [STATUS: MATCH]",
    ]
    orchestrator.answer("How much is tuition?")

    orchestrator.upsert_entry("p1", {"content": "Tuition is $1300/month."})
    assert len(orchestrator.cache) == 0

    result = orchestrator.answer("How much is tuition?")

    assert len(fake_model.calls) == 2
    assert result.metadata.source == ResponseSource.AI
    assert result.text == "Tuition is $1300/month."
    assert 'CONTENT: "Tuition is $1300/month."' in fake_model.calls[1]["system"]


def test_delete_invalidates_cache(orchestrator, fake_model):
    orchestrator.answer("Fever rules?")

    assert orchestrator.delete_entry("proto-fever") is True
    orchestrator.answer("Fever rules?")

    assert len(fake_model.calls) == 2
    assert "Fever CONTENT" not in fake_model.calls[1]["system"]


def test_failed_delete_leaves_cache_alone(orchestrator, fake_model):
    orchestrator.answer("Fever rules?")

    assert orchestrator.delete_entry("does-not-exist") is False
    assert len(orchestrator.cache) == 1


def test_model_failure_logs_error_and_returns_fallback(knowledge_base, failing_model):
    orchestrator = FrontDeskOrchestrator(knowledge_base, failing_model)

    result = orchestrator.answer("How much is tuition?")

    assert result.success is False
    assert result.text == FALLBACK_MESSAGE
    assert "503" not in result.text
    assert result.metadata.category is None
    assert len(orchestrator.cache) == 0

    record = orchestrator.interaction_log.all_sorted()[0]
    assert record.source == ResponseSource.ERROR
    assert record.status == ResponseStatus.ERROR
    assert record.category is None


def test_failure_is_not_cached_and_next_query_retries_model(knowledge_base, failing_model):
    orchestrator = FrontDeskOrchestrator(knowledge_base, failing_model)
    orchestrator.answer("How much is tuition?")

    failing_model.error = None
    result = orchestrator.answer("How much is tuition?")

    assert len(failing_model.calls) == 2
    assert result.success is True
    assert result.metadata.source == ResponseSource.AI


def test_unexpected_client_exception_is_contained(knowledge_base):
    orchestrator = FrontDeskOrchestrator(knowledge_base, FakeModelClient(error=RuntimeError("boom")))

    result = orchestrator.answer("Hello?")

    assert result.success is False
    assert result.text == FALLBACK_MESSAGE


def test_empty_query_is_rejected_without_logging(orchestrator, fake_model):
    with pytest.raises(ValidationError):
        orchestrator.answer("   ")

    assert fake_model.calls == []
    assert len(orchestrator.interaction_log) == 0


def test_upsert_rejects_bad_id_and_type(orchestrator):
    with pytest.raises(ValidationError):
        orchestrator.upsert_entry("", {"topic": "T", "content": "C"})
    with pytest.raises(ValidationError):
        orchestrator.upsert_entry("has spaces", {"topic": "T", "content": "C"})
    with pytest.raises(ValidationError):
        orchestrator.upsert_entry("ok-id", {"topic": "T", "content": "C"}, entry_type="rule")

    assert orchestrator.knowledge_store.counts() == {"protocols": 2, "policies": 1}


def test_rejected_upsert_keeps_cache(orchestrator):
    orchestrator.answer("How much is tuition?")

    with pytest.raises(ValidationError):
        orchestrator.upsert_entry("p1", {"urgency": "high", "bogus": 1})

    assert len(orchestrator.cache) == 1


def test_upsert_creates_entry_visible_in_dashboard(orchestrator):
    entry, created = orchestrator.upsert_entry(
        "proto-lockdown",
        {"topic": "Lockdown", "content": "Doors stay locked.", "urgency": "high"},
        entry_type="protocol",
    )

    dashboard = orchestrator.get_dashboard()

    assert created is True
    assert dashboard["knowledge_base"][0]["id"] == "proto-lockdown"
    assert dashboard["knowledge_base"][0]["type"] == "protocol"
    assert dashboard["school_info"]["name"] == "Sunny Days Childcare"


def test_mutation_during_model_call_prevents_caching(knowledge_base):
    orchestrator = None

    class EditingModel(FakeModelClient):
        def complete(self, system_instructions, user_prompt, temperature=0.0):
            # An admin edit lands while the model is answering
            orchestrator.upsert_entry("p1", {"content": "Tuition is $1300/month."})
            return super().complete(system_instructions, user_prompt, temperature)

    model = EditingModel(responses=["Tuition is $1200/month. [STATUS: MATCH]"])
    orchestrator = FrontDeskOrchestrator(knowledge_base, model)

    result = orchestrator.answer("How much is tuition?")

    assert result.text == "Tuition is $1200/month."
    assert len(orchestrator.cache) == 0


def test_model_call_does_not_hold_the_lock(knowledge_base):
    started = threading.Event()
    release = threading.Event()

    class SlowModel(FakeModelClient):
        def complete(self, system_instructions, user_prompt, temperature=0.0):
            started.set()
            release.wait(timeout=5)
            return super().complete(system_instructions, user_prompt, temperature)

    orchestrator = FrontDeskOrchestrator(knowledge_base, SlowModel())
    worker = threading.Thread(target=orchestrator.answer, args=("Slow question?",))
    worker.start()
    assert started.wait(timeout=5)

    # Mutations and cache reads proceed while the model call is blocked
    assert orchestrator.delete_entry("proto-fever") is True
    assert orchestrator.cache.lookup("anything") is None

    release.set()
    worker.join(timeout=5)
    assert len(orchestrator.interaction_log) == 1


def test_concurrent_queries_each_produce_one_log_record(orchestrator):
    threads = [
        threading.Thread(target=orchestrator.answer, args=(f"Question {i}?",))
        for i in range(20)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert len(orchestrator.interaction_log) == 20


def test_cache_and_log_caps_are_applied(knowledge_base, fake_model):
    orchestrator = FrontDeskOrchestrator(
        knowledge_base, fake_model, cache_max_entries=1, log_max_records=2
    )

    for query in ("a?", "b?", "c?"):
        orchestrator.answer(query)

    assert len(orchestrator.cache) == 1
    assert len(orchestrator.interaction_log) == 2
