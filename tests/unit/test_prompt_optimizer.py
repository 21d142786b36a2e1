"""
Unit Tests for the PromptOptimizer Facade

Tests configuration merging, pattern selection by aggressiveness and
category, custom patterns and the dual optimizer factory.
"""

import re

import pytest

from leanprompt import PromptOptimizer, create_dual_optimizer
from leanprompt.config import OptimizerConfig
from leanprompt.config.schemas import Aggressiveness
from leanprompt.errors import ConfigurationError, DuplicatePatternError, InvalidPatternError
from leanprompt.models import DualOptimizationResult, Pattern
from leanprompt.optimizers import PatternRegistry
from leanprompt.patterns import get_all_patterns, get_available_categories, get_patterns_by_aggressiveness

MODEL = "claude-3-haiku"


def custom_pattern(pattern_id: str = "custom-shout", **overrides) -> Pattern:
    fields = {
        "id": pattern_id,
        "category": "custom",
        "description": "Replace shouting",
        "priority": 100,
        "find": re.compile(r"!{2,}"),
        "replace": "!",
    }
    fields.update(overrides)
    return Pattern(**fields)


@pytest.fixture
def optimizer(token_cache) -> PromptOptimizer:
    return PromptOptimizer({"model": MODEL}, token_cache=token_cache)


class TestConfiguration:
    """Tests for configuration handling."""

    def test_defaults(self, token_cache):
        config = PromptOptimizer(token_cache=token_cache).get_config()

        assert config.model == "gpt-3.5-turbo"
        assert config.aggressiveness == Aggressiveness.MEDIUM
        assert config.preserve_formatting is True
        assert config.enabled_categories == ["all"]
        assert config.track_pattern_effectiveness is True

    def test_accepts_config_model(self, token_cache):
        config = OptimizerConfig(model=MODEL, aggressiveness="low")
        optimizer = PromptOptimizer(config, token_cache=token_cache)

        assert optimizer.get_config().aggressiveness == Aggressiveness.LOW
        # The caller's object is not shared
        optimizer.set_aggressiveness("high")
        assert config.aggressiveness == Aggressiveness.LOW

    @pytest.mark.parametrize(
        "config",
        [
            {"aggressiveness": "extreme"},
            {"model": ""},
            {"preserve_formatting": "maybe"},
            {"enabled_categories": [""]},
        ],
    )
    def test_invalid_config(self, config, token_cache):
        with pytest.raises(ConfigurationError):
            PromptOptimizer(config, token_cache=token_cache)

    def test_config_must_be_mapping(self, token_cache):
        with pytest.raises(ConfigurationError):
            PromptOptimizer(["model", MODEL], token_cache=token_cache)

    def test_invalid_custom_pattern(self, token_cache):
        with pytest.raises(InvalidPatternError):
            PromptOptimizer(
                {"model": MODEL, "custom_patterns": [custom_pattern(replace=None)]},
                token_cache=token_cache,
            )

    def test_get_config_is_a_copy(self, optimizer):
        config = optimizer.get_config()
        config.enabled_categories.append("meta")
        assert optimizer.get_config().enabled_categories == ["all"]


class TestPatternSelection:
    """Tests for the active pattern set."""

    def test_active_set_follows_aggressiveness(self, optimizer):
        for level in ("low", "medium", "high"):
            optimizer.set_aggressiveness(level)
            active = {p.id for p in optimizer.get_patterns()}
            assert active == {p.id for p in get_patterns_by_aggressiveness(level)}

    def test_unknown_aggressiveness(self, optimizer):
        with pytest.raises(ConfigurationError):
            optimizer.set_aggressiveness("extreme")

    def test_disable_category(self, optimizer):
        optimizer.disable_category("filler")

        assert "filler" not in {p.category for p in optimizer.get_patterns()}
        config = optimizer.get_config()
        assert "all" not in config.enabled_categories
        assert "filler" not in config.enabled_categories
        assert "formatting" in config.enabled_categories

    def test_enable_category(self, optimizer):
        optimizer.disable_category("all")
        assert optimizer.get_patterns() == []

        optimizer.enable_category("filler")
        assert {p.category for p in optimizer.get_patterns()} == {"filler"}

        optimizer.enable_category("all")
        assert optimizer.get_config().enabled_categories == ["all"]

    def test_enable_category_is_idempotent(self, optimizer):
        optimizer.disable_category("all")
        optimizer.enable_category("meta")
        optimizer.enable_category("meta")
        assert optimizer.get_config().enabled_categories == ["meta"]

    def test_empty_category_rejected(self, optimizer):
        with pytest.raises(ConfigurationError):
            optimizer.enable_category("  ")

    def test_available_categories_include_registry_categories(self, token_cache):
        registry = PatternRegistry.with_builtin_patterns()
        registry.register(custom_pattern())
        optimizer = PromptOptimizer({"model": MODEL}, registry=registry, token_cache=token_cache)

        assert optimizer.get_available_categories() == [*get_available_categories(), "custom"]

    def test_explicit_registry(self, token_cache):
        registry = PatternRegistry()
        registry.register(custom_pattern("only"))
        optimizer = PromptOptimizer({"model": MODEL}, registry=registry, token_cache=token_cache)

        assert [p.id for p in optimizer.get_patterns()] == ["only"]
        assert optimizer.optimize("Stop!!!").optimized_text == "Stop!"


class TestCustomPatterns:
    """Tests for caller-supplied patterns."""

    def test_custom_patterns_always_active(self, token_cache):
        optimizer = PromptOptimizer(
            {"model": MODEL, "aggressiveness": "low", "custom_patterns": [custom_pattern()]},
            token_cache=token_cache,
        )
        optimizer.disable_category("all")

        assert [p.id for p in optimizer.get_patterns()] == ["custom-shout"]
        assert optimizer.optimize("Wow!!!").optimized_text == "Wow!"

    def test_custom_pattern_overrides_builtin_id(self, token_cache):
        override = custom_pattern("remove-please", category="filler", find=r"\bplease\b", replace="pls")
        optimizer = PromptOptimizer(
            {"model": MODEL, "custom_patterns": [override]},
            token_cache=token_cache,
        )

        matching = [p for p in optimizer.get_patterns() if p.id == "remove-please"]
        assert len(matching) == 1
        assert optimizer.optimize("please help").optimized_text == "pls help"

    def test_add_pattern(self, optimizer):
        optimizer.add_pattern(custom_pattern())
        assert "custom-shout" in {p.id for p in optimizer.get_patterns()}

        optimizer.set_aggressiveness("low")
        assert "custom-shout" in {p.id for p in optimizer.get_patterns()}

    def test_add_pattern_duplicate(self, optimizer):
        with pytest.raises(DuplicatePatternError):
            optimizer.add_pattern(custom_pattern("remove-please"))

    def test_add_invalid_pattern(self, optimizer):
        with pytest.raises(InvalidPatternError):
            optimizer.add_pattern(custom_pattern(find="(", replace="x"))

    def test_duplicate_custom_ids(self, token_cache):
        with pytest.raises(DuplicatePatternError):
            PromptOptimizer(
                {"custom_patterns": [custom_pattern(), custom_pattern()]},
                token_cache=token_cache,
            )


class TestOptimize:
    """End-to-end optimization through the facade."""

    def test_scenario_ask_about_weather(self, optimizer):
        result = optimizer.optimize("I would like to ask about the weather.")

        assert "Tell me about the weather." in result.optimized_text
        assert result.tokens_saved > 0

    def test_empty_input(self, optimizer):
        result = optimizer.optimize("")
        assert result.to_dict()["applied_patterns"] == []
        assert result.tokens_saved == 0

    def test_filler_removal(self, optimizer):
        result = optimizer.optimize("Could you please basically summarize this report?")
        assert "please" not in result.optimized_text.lower()
        assert "basically" not in result.optimized_text.lower()

    def test_effectiveness_survives_reconfiguration(self, optimizer):
        optimizer.optimize("Please summarize this report.")
        before = optimizer.get_pattern_effectiveness_metrics()["remove-please"].times_applied

        optimizer.disable_category("meta")
        after = optimizer.get_pattern_effectiveness_metrics()["remove-please"].times_applied

        assert before == 1
        assert after == before

    def test_most_effective_patterns(self, optimizer):
        optimizer.optimize("Please basically just summarize this in order to save time.")
        ranked = optimizer.get_most_effective_patterns(limit=3)

        assert 0 < len(ranked) <= 3
        assert all(p.effectiveness_metrics.times_applied > 0 for p in ranked)

    def test_count_tokens(self, optimizer):
        assert optimizer.count_tokens("Tell me about the weather.") == 11
        assert optimizer.count_tokens("", model="gpt-4") == 0

    def test_set_model(self, optimizer):
        optimizer.set_model("unknown-model")
        assert optimizer.get_config().model == "unknown-model"

        with pytest.raises(ConfigurationError):
            optimizer.set_model("")
        assert optimizer.get_config().model == "unknown-model"

    def test_low_aggressiveness_does_not_grow_on_second_pass(self, token_cache):
        optimizer = PromptOptimizer({"model": MODEL, "aggressiveness": "low"}, token_cache=token_cache)
        texts = [
            "Please, I would really appreciate it if you could just summarize this.  Thanks in advance!",
            "Basically, in order to finish, I would like you to sort of review the code.\n\n\n\nThank you.",
            "Step 1: open the file   \n* check the output\n1) run the tests",
        ]

        for text in texts:
            first = optimizer.optimize(text)
            second = optimizer.optimize(first.optimized_text)
            assert second.optimized_token_count <= first.optimized_token_count

    def test_high_aggressiveness_does_not_grow_on_second_pass(self, token_cache):
        optimizer = PromptOptimizer(
            {"model": MODEL, "aggressiveness": "high", "preserve_formatting": False},
            token_cache=token_cache,
        )
        text = " ".join(p.example["before"] for p in get_all_patterns() if p.example)

        first = optimizer.optimize(text)
        second = optimizer.optimize(first.optimized_text)

        assert second.optimized_token_count <= first.optimized_token_count
        assert "- -" not in second.optimized_text
        assert "bulletize-instructions" not in {p.id for p in second.applied_patterns}


class TestDualFactory:
    """Tests for create_dual_optimizer."""

    def test_builds_over_active_set(self, token_cache):
        dual = create_dual_optimizer(0.5, {"model": MODEL}, token_cache=token_cache)
        expected = {p.id for p in get_patterns_by_aggressiveness("medium")}

        assert {p.id for p in dual.get_patterns()} == expected
        assert dual.get_balance() == 0.5

    def test_result_type(self, token_cache):
        dual = create_dual_optimizer(0.0, {"model": MODEL}, token_cache=token_cache)
        result = dual.optimize("I would like to ask about the weather in order to plan.")

        assert isinstance(result, DualOptimizationResult)
        assert result.balance == 0.0

    def test_invalid_balance(self, token_cache):
        with pytest.raises(ConfigurationError):
            create_dual_optimizer(1.5, token_cache=token_cache)
