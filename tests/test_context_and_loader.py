import json

import pytest

from src.knowledge.context import build_context
from src.knowledge.loader import HandbookLoadError, load_knowledge_base, parse_knowledge_base


def test_context_renders_protocols_then_policies(knowledge_base):
    context = build_context(knowledge_base)

    expected = (
        "SCHOOL NAME: Sunny Days Childcare\n\n"
        "PROTOCOLS:\n"
        "[PROTOCOL - HIGH] TOPIC: Fever CONTENT: \"Children with a fever of 100.4F go home.\" "
        "SOURCE: Health Handbook p.2 NOTE: Advise keeping the child home.\n"
        "---\n"
        "[PROTOCOL - STANDARD] TOPIC: Weather Closures CONTENT: \"We follow the district closure decisions.\" "
        "SOURCE: Parent Handbook p.11 NOTE: Point to the text alert.\n\n"
        "POLICIES:\n"
        "[POLICY] TOPIC: Tuition CONTENT: \"Tuition is $1200/month.\" "
        "SOURCE: Handbook p.4 NOTE: Quote the amount exactly."
    )
    assert context == expected


def test_context_is_deterministic(knowledge_base):
    assert build_context(knowledge_base) == build_context(knowledge_base)


def test_bundled_handbook_loads():
    knowledge_base = load_knowledge_base()

    assert knowledge_base.school_info.name
    assert knowledge_base.protocols
    assert knowledge_base.policies


def test_loader_keeps_school_extras_and_drops_type_keys(tmp_path):
    path = tmp_path / "handbook.json"
    path.write_text(json.dumps({
        "school_info": {"name": "Tiny Tots", "phone": "555-0100"},
        "protocols": [{"id": "a", "type": "protocol", "topic": "T", "content": "C", "urgency": "Medium"}],
        "policies": [{"id": "b", "type": "policy", "topic": "T", "content": "C"}],
    }))

    knowledge_base = load_knowledge_base(path)

    assert knowledge_base.school_info.model_dump()["phone"] == "555-0100"
    assert knowledge_base.protocols[0].urgency == "medium"


def test_loader_rejects_duplicate_ids_across_types():
    with pytest.raises(HandbookLoadError, match="Duplicate"):
        parse_knowledge_base({
            "school_info": {"name": "Tiny Tots"},
            "protocols": [{"id": "x", "topic": "T", "content": "C"}],
            "policies": [{"id": "x", "topic": "T", "content": "C"}],
        })


def test_loader_reports_missing_file(tmp_path):
    with pytest.raises(HandbookLoadError, match="not found"):
        load_knowledge_base(tmp_path / "missing.json")


def test_loader_reports_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(HandbookLoadError, match="not valid JSON"):
        load_knowledge_base(path)
