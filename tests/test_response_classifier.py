from src.analytics.response_classifier import STATUS_TAGS, classify_response
from src.memory.interaction_log import ResponseCategory


def test_gap_tag_is_detected_and_stripped():
    result = classify_response("We don't have that information. Source: Handbook\n[STATUS: GAP]")

    assert result.category == ResponseCategory.GAP
    assert result.text == "We don't have that information. Source: Handbook"


def test_unrelated_tag():
    result = classify_response("I can only help with school questions. [STATUS: UNRELATED]")

    assert result.category == ResponseCategory.UNRELATED
    assert "[STATUS" not in result.text


def test_match_tag():
    result = classify_response("Tuition is $1200/month. [Handbook p.4]\n[STATUS: MATCH]")

    assert result.category == ResponseCategory.MATCH
    assert result.text == "Tuition is $1200/month. [Handbook p.4]"


def test_missing_tag_defaults_to_match():
    result = classify_response("  Tuition is $1200/month.  ")

    assert result.category == ResponseCategory.MATCH
    assert result.text == "Tuition is $1200/month."


def test_gap_wins_over_other_tags_and_all_tags_are_stripped():
    result = classify_response("[STATUS: MATCH] Partial answer. [STATUS: UNRELATED] [STATUS: GAP]")

    assert result.category == ResponseCategory.GAP
    assert result.text == "Partial answer."


def test_tags_are_exact_literals():
    assert STATUS_TAGS[ResponseCategory.MATCH] == "[STATUS: MATCH]"
    assert STATUS_TAGS[ResponseCategory.GAP] == "[STATUS: GAP]"
    assert STATUS_TAGS[ResponseCategory.UNRELATED] == "[STATUS: UNRELATED]"
