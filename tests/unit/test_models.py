"""
Unit Tests for the Data Model

Tests Pattern validation, replacement variants, effectiveness metrics
and result serialization.
"""

import re

import pytest

from leanprompt.errors import InvalidPatternError
from leanprompt.models import (
    AppliedPatternInfo,
    CallbackReplacement,
    DualOptimizationResult,
    EffectivenessMetrics,
    LiteralReplacement,
    OptimizationResult,
    Pattern,
    PerformanceMetrics,
    validate_pattern,
)


def make_pattern(**overrides) -> Pattern:
    fields = {
        "id": "test-pattern",
        "category": "filler",
        "description": "Test pattern",
        "priority": 10,
        "find": re.compile(r"\bvery\s+", re.I),
        "replace": "",
    }
    fields.update(overrides)
    return Pattern(**fields)


class TestReplacement:
    """Tests for the replacement variants."""

    def test_string_replace_becomes_literal(self):
        pattern = make_pattern(replace=r"\1")
        assert isinstance(pattern.replace, LiteralReplacement)

    def test_callable_replace_becomes_callback(self):
        pattern = make_pattern(replace=lambda m: m.group(0).upper())
        assert isinstance(pattern.replace, CallbackReplacement)

    def test_literal_supports_group_references(self):
        replacement = LiteralReplacement(r"\2 \1")
        assert replacement.substitute(re.compile(r"(\w+) (\w+)"), "hello world") == "world hello"

    def test_callback_failure_keeps_match(self):
        """A raising callback leaves that match untouched."""

        def replacer(match):
            if match.group(0) == "b":
                raise ValueError("no b")
            return match.group(0).upper()

        replacement = CallbackReplacement(replacer)
        assert replacement.substitute(re.compile(r"[abc]"), "abc") == "AbC"

    def test_callback_non_string_keeps_match(self):
        replacement = CallbackReplacement(lambda m: 42)
        assert replacement.substitute(re.compile(r"x"), "xyx") == "xyx"


class TestValidatePattern:
    """Tests for validate_pattern."""

    def test_valid_find_replace_pattern(self):
        pattern = make_pattern()
        assert validate_pattern(pattern) is pattern

    def test_valid_transform_pattern(self):
        pattern = make_pattern(find=None, replace=None, transform=str.strip)
        assert validate_pattern(pattern) is pattern

    def test_string_find_is_accepted(self):
        validate_pattern(make_pattern(find=r"\bvery\b"))

    def test_not_a_pattern(self):
        with pytest.raises(InvalidPatternError):
            validate_pattern({"id": "x"})

    @pytest.mark.parametrize("field", ["id", "category", "description"])
    def test_missing_required_field(self, field):
        with pytest.raises(InvalidPatternError) as exc_info:
            validate_pattern(make_pattern(**{field: "  "}))
        assert exc_info.value.details["field"] == field

    def test_find_without_replace(self):
        with pytest.raises(InvalidPatternError, match="replace"):
            validate_pattern(make_pattern(replace=None))

    def test_neither_find_nor_transform(self):
        with pytest.raises(InvalidPatternError, match="find or transform"):
            validate_pattern(make_pattern(find=None, replace=None))

    def test_invalid_regex(self):
        with pytest.raises(InvalidPatternError, match="regular expression"):
            validate_pattern(make_pattern(find="(unclosed"))

    def test_boolean_priority_rejected(self):
        with pytest.raises(InvalidPatternError, match="priority"):
            validate_pattern(make_pattern(priority=True))

    def test_non_callable_transform(self):
        with pytest.raises(InvalidPatternError, match="transform"):
            validate_pattern(make_pattern(find=None, replace=None, transform="upper"))

    def test_non_callable_test(self):
        with pytest.raises(InvalidPatternError, match="test"):
            validate_pattern(make_pattern(test=True))

    def test_invalid_replace_type(self):
        with pytest.raises(InvalidPatternError):
            validate_pattern(make_pattern(replace=3))


class TestEffectivenessMetrics:
    """Tests for EffectivenessMetrics."""

    def test_record_applied(self):
        metrics = EffectivenessMetrics()
        metrics.record_applied(4)
        metrics.record_applied(2)

        assert metrics.times_applied == 2
        assert metrics.total_tokens_saved == 6
        assert metrics.avg_tokens_saved == 3.0
        assert metrics.success_rate == 1.0
        assert metrics.last_applied is not None

    def test_record_skipped_updates_success_rate(self):
        metrics = EffectivenessMetrics()
        metrics.record_applied(1)
        metrics.record_skipped()
        metrics.record_skipped()
        metrics.record_skipped()

        assert metrics.times_skipped == 3
        assert metrics.success_rate == 0.25

    def test_copy_is_independent(self):
        metrics = EffectivenessMetrics()
        snapshot = metrics.copy()
        metrics.record_applied(5)
        assert snapshot.times_applied == 0

    def test_to_dict(self):
        data = EffectivenessMetrics().to_dict()
        assert data["times_applied"] == 0
        assert data["last_applied"] is None


class TestPattern:
    """Tests for Pattern helpers."""

    def test_compiled_find_from_string(self):
        pattern = make_pattern(find=r"\bvery\b")
        assert pattern.compiled_find().search("very good")

    def test_clone_copies_metrics(self):
        pattern = make_pattern(effectiveness_metrics=EffectivenessMetrics())
        clone = pattern.clone()
        clone.effectiveness_metrics.record_applied(3)

        assert clone.id == pattern.id
        assert pattern.effectiveness_metrics.times_applied == 0

    def test_to_dict(self):
        data = make_pattern().to_dict()
        assert data["id"] == "test-pattern"
        assert data["find"] == r"\bvery\s+"
        assert data["has_transform"] is False
        assert data["effectiveness_metrics"] is None


class TestResults:
    """Tests for result types."""

    def test_applied_pattern_token_change(self):
        info = AppliedPatternInfo.from_pattern(make_pattern(), tokens_saved=3)
        assert info.token_change == -3
        assert info.to_dict()["tokens_saved"] == 3

    def test_unchanged_result(self):
        result = OptimizationResult.unchanged("")
        assert result.tokens_saved == 0
        assert result.applied_patterns == []
        assert result.optimized_text == ""

    def test_result_to_dict_reports_skipped_ids(self):
        result = OptimizationResult(
            original_text="a",
            optimized_text="a",
            original_token_count=1,
            optimized_token_count=1,
            tokens_saved=0,
            percent_saved=0.0,
            skipped_patterns=[make_pattern()],
            performance_metrics=PerformanceMetrics(execution_time_ms=1.23456, tokens_per_second=810.0),
        )
        data = result.to_dict()
        assert data["skipped_patterns"] == ["test-pattern"]
        assert data["performance_metrics"]["execution_time_ms"] == 1.235

    def test_dual_result_includes_balance(self):
        result = DualOptimizationResult(
            original_text="a",
            optimized_text="a",
            original_token_count=1,
            optimized_token_count=1,
            tokens_saved=0,
            percent_saved=0.0,
            balance=0.25,
        )
        assert result.to_dict()["balance"] == 0.25
