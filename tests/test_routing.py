"""Tests for the intent router and its rule data."""

from __future__ import annotations

import unicodedata

import pytest

from linguachat.routing import classify_intent, has_tool_trigger, is_faq_query, normalize_mode
from linguachat.routing_rules import FAQ_KEYWORDS, FAQ_PATTERNS, RULES_VERSION, TOOL_TRIGGER_PHRASES


class TestExplicitMode:
    """An explicit client mode always wins over classification."""

    @pytest.mark.parametrize(
        "message",
        [
            "what is the price of your plans",
            "từ hello phát âm như nào",
            "hi there",
            "a" * 1000,
        ],
    )
    @pytest.mark.parametrize("mode", ["faq", "practice"])
    def test_override_is_returned_unchanged(self, message, mode):
        assert classify_intent(message, mode) == mode

    def test_override_is_case_insensitive(self):
        assert classify_intent("hello", "FAQ") == "faq"

    @pytest.mark.parametrize("mode", [None, "", "support", "auto"])
    def test_unrecognised_mode_falls_back_to_auto(self, mode):
        assert normalize_mode(mode) is None
        assert classify_intent("what is the price of your plans", mode) == "faq"


class TestToolTriggerPrecedence:
    """Tool triggers are checked before FAQ rules: a message with both is practice."""

    @pytest.mark.parametrize(
        "message",
        [
            "what's the price of pronunciation lessons",
            "translate the subscription plan description",
            "cho tôi bài tập từ vựng về giá cả",
            "vocabulary quiz about the premium plan features",
            "grammar check: how to contact support",
        ],
    )
    def test_trigger_beats_faq_keyword(self, message):
        assert is_faq_query(message) is False
        assert classify_intent(message) == "practice"

    @pytest.mark.parametrize("phrase", TOOL_TRIGGER_PHRASES)
    def test_every_trigger_forces_practice(self, phrase):
        assert classify_intent(f"price plan {phrase}") == "practice"


class TestFaqDetection:
    @pytest.mark.parametrize(
        "message",
        [
            "what is the price of your plans",
            "How do I subscribe?",
            "Tell me about the learning roadmap",
            "giá gói premium bao nhiêu",
            "tôi muốn hỏi về lộ trình học",
            "contact information please",
            "I have a problem with the app",
            "số điện thoại hỗ trợ là gì",
        ],
    )
    def test_faq_messages(self, message):
        assert classify_intent(message) == "faq"

    @pytest.mark.parametrize(
        "message",
        ["hi, how are you today?", "I went to the beach yesterday", "tell me a story"],
    )
    def test_default_is_practice(self, message):
        assert classify_intent(message) == "practice"

    def test_matching_is_case_insensitive(self):
        assert classify_intent("WHAT IS THE PRICE?") == "faq"

    def test_decomposed_unicode_is_normalised(self):
        decomposed = unicodedata.normalize("NFD", "từ hello phát âm như nào")
        assert decomposed != unicodedata.normalize("NFC", decomposed)
        assert has_tool_trigger(decomposed) is True


class TestRuleData:
    def test_rules_are_versioned(self):
        assert RULES_VERSION

    def test_rule_entries_are_lower_case(self):
        for entry in (*TOOL_TRIGGER_PHRASES, *FAQ_KEYWORDS):
            assert entry == entry.lower()

    def test_patterns_are_compiled(self):
        assert all(hasattr(p, "search") for p in FAQ_PATTERNS)
