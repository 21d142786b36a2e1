"""
Unit Tests for the MCP Tool Layer

Tests PromptTools, the logic behind the server's tools.
"""

import pytest

from leanprompt.config import LeanPromptSettings
from leanprompt.optimizers.registry import PatternRegistry
from leanprompt.tools import VERSION, PromptTools

MODEL = "claude-3-haiku"


@pytest.fixture
def tools(token_cache) -> PromptTools:
    settings = LeanPromptSettings(optimizer={"model": MODEL})
    return PromptTools(settings=settings, token_cache=token_cache)


class TestOptimizePrompt:
    """Tests for optimize_prompt."""

    def test_success(self, tools):
        result = tools.optimize_prompt("I would like to ask about the weather.")

        assert result["success"] is True
        assert "Tell me about the weather." in result["optimized_text"]
        assert result["tokens_saved"] > 0
        assert result["applied_patterns"]

    def test_empty_text(self, tools):
        result = tools.optimize_prompt("")

        assert result["success"] is True
        assert result["optimized_text"] == ""
        assert result["tokens_saved"] == 0

    def test_override_does_not_change_shared_config(self, tools):
        result = tools.optimize_prompt("Stop!!!", aggressiveness="low", categories=["formatting"])

        assert result["success"] is True
        assert tools.get_status()["optimizer"]["aggressiveness"] == "medium"
        assert tools.get_status()["optimizer"]["enabled_categories"] == ["all"]

    def test_balance_runs_dual_optimizer(self, tools):
        result = tools.optimize_prompt("I would like to ask about the weather.", balance=0.0)

        assert result["success"] is True
        assert result["balance"] == 0.0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"aggressiveness": "extreme"},
            {"categories": [" "]},
            {"model": "  "},
            {"balance": 1.5},
        ],
    )
    def test_invalid_overrides(self, tools, obs, overrides):
        result = tools.optimize_prompt("please help", **overrides)

        assert result["success"] is False
        assert result["error_code"] == "CONFIGURATION_ERROR"
        assert obs.get_counter("tools.errors", {"tool": "optimize_prompt"}) == 1

    def test_counted(self, tools, obs):
        tools.optimize_prompt("hello")
        tools.optimize_prompt("hello")
        assert obs.get_counter("tools.optimize_prompt") == 2


class TestCountTokens:
    """Tests for count_tokens."""

    def test_claude(self, tools):
        result = tools.count_tokens("Tell me about the weather.", model=MODEL)

        assert result == {
            "success": True,
            "token_count": 11,
            "model": MODEL,
            "tokenizer": "claude",
            "character_count": 26,
        }

    def test_unknown_model_uses_simple_tokenizer(self, tools):
        result = tools.count_tokens("some text", model="mystery-model")

        assert result["success"] is True
        assert result["tokenizer"] == "simple"
        assert result["token_count"] > 0


class TestListPatterns:
    """Tests for list_patterns."""

    def test_all(self, tools):
        result = tools.list_patterns()

        assert result["success"] is True
        assert result["count"] == len(tools.registry)
        priorities = [p["priority"] for p in result["patterns"]]
        assert priorities == sorted(priorities, reverse=True)

    def test_by_category(self, tools):
        result = tools.list_patterns(category="filler")

        assert result["count"] > 0
        assert {p["category"] for p in result["patterns"]} == {"filler"}

    def test_unknown_category(self, tools):
        assert tools.list_patterns(category="nonexistent")["count"] == 0

    def test_low_aggressiveness_is_subset(self, tools):
        low = tools.list_patterns(aggressiveness="low")["count"]
        high = tools.list_patterns(aggressiveness="high")["count"]
        assert 0 < low < high

    def test_invalid_aggressiveness(self, tools):
        result = tools.list_patterns(aggressiveness="extreme")

        assert result["success"] is False
        assert result["details"]["allowed"] == ["low", "medium", "high"]


class TestPatternEffectiveness:
    """Tests for pattern_effectiveness."""

    def test_empty_before_use(self, tools):
        result = tools.pattern_effectiveness()

        assert result["success"] is True
        assert result["tracking_enabled"] is True
        assert result["patterns"] == []

    def test_after_optimize(self, tools):
        tools.optimize_prompt("I would like to ask about the weather.")
        result = tools.pattern_effectiveness(limit=5)

        assert 0 < len(result["patterns"]) <= 5
        assert all(p["metrics"]["times_applied"] >= 1 for p in result["patterns"])

    def test_overridden_calls_not_tracked(self, tools):
        tools.optimize_prompt("I would like to ask about the weather.", aggressiveness="high")
        assert tools.pattern_effectiveness()["patterns"] == []

    def test_invalid_limit(self, tools):
        result = tools.pattern_effectiveness(limit=-1)

        assert result["success"] is False
        assert result["error_code"] == "INVALID_INPUT"


class TestGetStatus:
    """Tests for get_status."""

    def test_status(self, tools, token_cache):
        status = tools.get_status()

        assert status["success"] is True
        assert status["service"] == "leanprompt"
        assert status["version"] == VERSION
        assert status["optimizer"]["model"] == MODEL
        assert status["optimizer"]["active_patterns"] > 0
        assert status["registry"]["patterns"] == len(tools.registry)
        assert status["token_cache"] == token_cache.get_stats()
        assert "metrics" not in status

    def test_include_metrics(self, tools):
        tools.optimize_prompt("please help")
        status = tools.get_status(include_metrics=True)

        assert status["metrics"]["counters"]["tools.optimize_prompt"] == 1

    def test_reports_cache_gauges(self, tools, token_cache):
        tools.count_tokens("Tell me about the weather.", model=MODEL)
        gauges = tools.get_status(include_metrics=True)["metrics"]["gauges"]

        assert gauges["token_cache.size"] == len(token_cache) == 1
        assert gauges["token_cache.hit_rate"] == token_cache.get_stats()["hit_rate"]

    def test_custom_registry(self, token_cache):
        tools = PromptTools(
            settings=LeanPromptSettings(optimizer={"model": MODEL}),
            registry=PatternRegistry(),
            token_cache=token_cache,
        )
        status = tools.get_status()

        assert status["registry"] == {"patterns": 0, "categories": []}
        assert status["optimizer"]["active_patterns"] == 0
