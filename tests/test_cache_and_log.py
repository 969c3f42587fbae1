from datetime import datetime, timedelta

from src.memory.cache import ResponseCache, normalize_query
from src.memory.interaction_log import (
    InteractionLog,
    LogRecord,
    ResponseCategory,
    ResponseSource,
    ResponseStatus,
)


def _record(query, timestamp=None, **overrides):
    fields = dict(
        query=query,
        response="answer",
        latency_ms=5,
        source=ResponseSource.AI,
        status=ResponseStatus.SUCCESS,
        category=ResponseCategory.MATCH,
    )
    fields.update(overrides)
    if timestamp is not None:
        fields["timestamp"] = timestamp
    return LogRecord(**fields)


def test_normalize_query_trims_and_lowercases():
    assert normalize_query("  How Much Is Tuition?\n") == "how much is tuition?"


def test_cache_store_lookup_clear():
    cache = ResponseCache()
    cache.store("q", "a")

    assert cache.lookup("q") == "a"
    assert cache.lookup("other") is None
    assert cache.clear() == 1
    assert cache.lookup("q") is None
    assert len(cache) == 0


def test_cache_is_unbounded_by_default():
    cache = ResponseCache()
    for i in range(500):
        cache.store(f"q{i}", "a")

    assert len(cache) == 500


def test_cache_cap_evicts_oldest_entry():
    cache = ResponseCache(max_entries=2)
    cache.store("first", "1")
    cache.store("second", "2")
    cache.store("third", "3")

    assert "first" not in cache
    assert cache.lookup("second") == "2"
    assert cache.lookup("third") == "3"


def test_log_returns_newest_first():
    log = InteractionLog()
    now = datetime.utcnow()
    log.append(_record("old", timestamp=now - timedelta(minutes=5)))
    log.append(_record("new", timestamp=now))
    log.append(_record("middle", timestamp=now - timedelta(minutes=1)))

    assert [r.query for r in log.all_sorted()] == ["new", "middle", "old"]


def test_log_ties_put_latest_append_first():
    log = InteractionLog()
    now = datetime.utcnow()
    log.append(_record("a", timestamp=now))
    log.append(_record("b", timestamp=now))

    assert [r.query for r in log.all_sorted()] == ["b", "a"]


def test_log_snapshot_is_independent_of_later_appends():
    log = InteractionLog()
    log.append(_record("a"))
    snapshot = log.all_sorted()
    log.append(_record("b"))

    assert len(snapshot) == 1
    assert len(log) == 2


def test_log_retention_cap_keeps_newest():
    log = InteractionLog(max_records=2)
    for query in ("a", "b", "c"):
        log.append(_record(query))

    assert {r.query for r in log.all_sorted()} == {"b", "c"}


def test_error_record_serializes_without_category():
    record = _record(
        "q",
        source=ResponseSource.ERROR,
        status=ResponseStatus.ERROR,
        category=None,
    )

    data = record.to_dict()
    assert data["source"] == "ERROR"
    assert data["status"] == "error"
    assert data["category"] is None
    assert data["id"]
