"""Tests for CrisisClassifier - safety-critical code.

Covers the literal phrase list, the paraphrase patterns, the severity
rule and the edge cases around empty or non-text input.
"""
import re

import pytest

from mindwell.shared.models import CrisisAnalysis, CrisisSeverity
from mindwell.services.safety_service import classify
from mindwell.services.safety_service.classifier import CrisisClassifier
from mindwell.services.safety_service.config import CRISIS_CONTEXT, SafetyConfig


@pytest.fixture
def classifier():
    """Create a CrisisClassifier with the default lists."""
    return CrisisClassifier()


class TestNonCrisisMessages:
    """Messages that must not be flagged."""

    def test_exam_stress_is_not_crisis(self, classifier):
        """Everyday stress without crisis language is not a crisis."""
        result = classifier.classify("I am stressed about exams")

        assert result.is_crisis is False
        assert result.severity == CrisisSeverity.NONE
        assert result.annotation is None
        assert result.matched_keywords == ()

    def test_greeting_is_not_crisis(self, classifier):
        result = classifier.classify("Hi, I'm stressed about exams")
        assert result.is_crisis is False

    @pytest.mark.parametrize("value", ["", "   ", None, 42, ["suicide"]])
    def test_empty_or_non_text_input(self, classifier, value):
        """Empty and non-string input is never a crisis."""
        result = classifier.classify(value)

        assert result.is_crisis is False
        assert result.severity == CrisisSeverity.NONE


class TestKeywordDetection:
    """Literal phrase containment."""

    def test_direct_phrase_is_high_severity(self, classifier):
        """'kill myself' is both a crisis phrase and an immediate-risk phrase."""
        result = classifier.classify("kill myself")

        assert result.is_crisis is True
        assert result.severity == CrisisSeverity.HIGH
        assert "kill myself" in result.matched_keywords

    def test_dont_want_to_live_is_moderate(self, classifier):
        """Crisis phrase without an immediate-risk phrase is moderate."""
        result = classifier.classify("I don't want to live anymore")

        assert result.is_crisis is True
        assert result.severity == CrisisSeverity.MODERATE

    def test_hopeless_is_moderate(self, classifier):
        result = classifier.classify("I feel hopeless and don't want to live anymore")

        assert result.is_crisis is True
        assert result.severity == CrisisSeverity.MODERATE
        assert "hopeless" in result.matched_keywords
        assert "don't want to live" in result.matched_keywords

    def test_case_insensitive(self, classifier):
        result = classifier.classify("I have been thinking about SUICIDE")

        assert result.is_crisis is True
        assert result.severity == CrisisSeverity.HIGH

    @pytest.mark.parametrize("text", [
        "I took an overdose last night",
        "I want to jump off the roof",
        "I keep a razor in my drawer",
        "my dad has a gun at home",
        "I thought about hanging",
    ])
    def test_method_mentions_are_high(self, classifier, text):
        """Method mentions in the immediate-risk list raise severity."""
        result = classifier.classify(text)

        assert result.is_crisis is True
        assert result.severity == CrisisSeverity.HIGH

    def test_substring_matching(self, classifier):
        """Phrases match as substrings, not whole words."""
        result = classifier.classify("I've been self-harming again")

        assert result.is_crisis is True
        assert "self-harm" in result.matched_keywords


class TestPatternDetection:
    """Paraphrased crisis expressions caught by regex templates."""

    @pytest.mark.parametrize("text", [
        "I want to die",
        "sometimes i want to end it",
        "Life isn't worth living",
        "life is not worth it anymore",
        "Nobody would miss me",
        "the world would be better without me",
        "I can't take it anymore",
        "I've been thinking about dying",
    ])
    def test_paraphrases_are_crisis(self, classifier, text):
        result = classifier.classify(text)
        assert result.is_crisis is True

    def test_pattern_only_match_is_moderate(self, classifier):
        """A pattern match without immediate-risk phrases stays moderate."""
        result = classifier.classify("Nobody cares about me")

        assert result.is_crisis is True
        assert result.severity == CrisisSeverity.MODERATE
        assert any("nobody" in match for match in result.matched_keywords)


class TestAnnotation:
    """The annotation is the same fixed text for every severity."""

    def test_annotation_is_fixed_text(self, classifier):
        high = classifier.classify("kill myself")
        moderate = classifier.classify("I feel hopeless")

        assert high.annotation == CRISIS_CONTEXT
        assert moderate.annotation == CRISIS_CONTEXT
        assert "CRISIS ALERT" in CRISIS_CONTEXT


class TestDeterminism:

    def test_same_input_same_output(self, classifier):
        text = "I feel hopeless and want to give up"
        assert classifier.classify(text) == classifier.classify(text)

    def test_module_level_classify_matches_instance(self, classifier):
        text = "Life isn't worth living"
        assert classify(text) == classifier.classify(text)


class TestCustomLists:
    """Phrase lists are configuration data and can be replaced."""

    def test_custom_keywords(self):
        custom = CrisisClassifier(
            keywords={"unalive"},
            patterns=[],
            immediate_keywords={"unalive"},
        )

        assert custom.classify("I want to unalive").severity == CrisisSeverity.HIGH
        assert custom.classify("I feel hopeless").is_crisis is False

    def test_custom_patterns(self):
        custom = CrisisClassifier(
            keywords=set(),
            patterns=[re.compile(r"no reason to (stay|go on)")],
            immediate_keywords=set(),
        )

        result = custom.classify("There's no reason to stay")
        assert result.is_crisis is True
        assert result.severity == CrisisSeverity.MODERATE

    def test_pattern_version_exposed(self):
        custom = CrisisClassifier(config=SafetyConfig(pattern_version="test.1"))
        assert custom.pattern_version == "test.1"


class TestCrisisAnalysisModel:

    def test_crisis_requires_severity(self):
        with pytest.raises(ValueError):
            CrisisAnalysis(is_crisis=True, severity=CrisisSeverity.NONE)

    def test_non_crisis_rejects_annotation(self):
        with pytest.raises(ValueError):
            CrisisAnalysis(is_crisis=False, annotation="text")

    def test_to_dict(self, classifier):
        data = classifier.classify("kill myself").to_dict()

        assert data["is_crisis"] is True
        assert data["severity"] == "high"
        assert data["annotation"] == CRISIS_CONTEXT

    def test_matched_keywords_immutable(self, classifier):
        result = classifier.classify("I want to kill myself")

        assert isinstance(result.matched_keywords, tuple)
        with pytest.raises(AttributeError):
            result.matched_keywords.append("extra")

    def test_non_crisis_results_not_shared_state(self, classifier):
        first = classifier.classify("I am stressed about exams")
        with pytest.raises(AttributeError):
            first.matched_keywords.append("poison")

        assert classifier.classify("Hi there").matched_keywords == ()

    def test_list_input_coerced_to_tuple(self):
        analysis = CrisisAnalysis(
            is_crisis=True,
            severity=CrisisSeverity.MODERATE,
            matched_keywords=["hopeless"],
        )
        assert analysis.matched_keywords == ("hopeless",)
