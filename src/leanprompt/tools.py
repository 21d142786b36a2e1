"""
LeanPrompt MCP Tools

Tool logic behind the MCP server. Every method returns a JSON-serializable
dict; failures are reported as structured error responses instead of raised.
"""

import logging
from typing import Any

from pydantic import ValidationError

from .cache.token_cache import TokenCache, get_token_cache
from .config import LeanPromptSettings, get_config
from .config.schemas import Aggressiveness, OptimizerConfig
from .errors import ConfigurationError, LeanPromptError, error_code_for, make_error_response
from .observability import get_observability
from .optimizer import PromptOptimizer, create_dual_optimizer
from .optimizers.registry import PatternRegistry
from .patterns import coerce_aggressiveness, matches_aggressiveness
from .tokenizers import create_tokenizer, resolve_tokenizer

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


class PromptTools:
    """
    MCP tools for prompt optimization.

    Provides 5 tools:
    - optimize_prompt: Rewrite a prompt with the active pattern set
    - count_tokens: Token count for any model
    - list_patterns: Browse the registered patterns
    - pattern_effectiveness: Patterns ranked by average saving
    - get_status: Configuration, cache and metrics snapshot
    """

    def __init__(
        self,
        settings: LeanPromptSettings | None = None,
        registry: PatternRegistry | None = None,
        token_cache: TokenCache | None = None,
    ) -> None:
        """
        Initialize prompt tools.

        Args:
            settings: Runtime settings (default: loaded from environment)
            registry: Pattern source (default: built-in libraries)
            token_cache: Token count cache (default: the shared cache)
        """
        self.settings = settings or get_config()
        self.registry = registry if registry is not None else PatternRegistry.with_builtin_patterns()
        self.token_cache = token_cache if token_cache is not None else get_token_cache()
        self.obs = get_observability()

        # Long-lived optimizer so effectiveness metrics accumulate across calls
        self.optimizer = PromptOptimizer(self.settings.optimizer, self.registry, self.token_cache)

        logger.info(
            f"Prompt tools initialized: model={self.settings.optimizer.model}, "
            f"aggressiveness={self.settings.optimizer.aggressiveness.value}, "
            f"patterns={len(self.registry)}"
        )

    def _error(self, tool: str, error: LeanPromptError) -> dict[str, Any]:
        self.obs.increment("tools.errors", tags={"tool": tool})
        logger.warning(f"{tool} failed: {error.message}", extra={"tool": tool, "details": error.details})
        return make_error_response(error_code_for(error), error.message, error.details)

    def _override_config(
        self,
        model: str | None,
        aggressiveness: Aggressiveness | str | None,
        preserve_formatting: bool | None,
        categories: list[str] | None,
    ) -> OptimizerConfig:
        config = self.optimizer.get_config()
        try:
            if model is not None:
                config.model = model
            if aggressiveness is not None:
                config.aggressiveness = coerce_aggressiveness(aggressiveness)
            if preserve_formatting is not None:
                config.preserve_formatting = preserve_formatting
            if categories is not None:
                config.enabled_categories = categories
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid optimizer override",
                details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            ) from e
        return config

    def optimize_prompt(
        self,
        text: str,
        model: str | None = None,
        aggressiveness: Aggressiveness | str | None = None,
        preserve_formatting: bool | None = None,
        categories: list[str] | None = None,
        balance: float | None = None,
    ) -> dict[str, Any]:
        """
        Optimize a prompt.

        Calls without overrides go through the shared optimizer, so their
        pattern effectiveness is tracked. Overrides or a ``balance`` build a
        one-off optimizer for the call.

        Args:
            text: Prompt to optimize
            model: Model used for token counting
            aggressiveness: low, medium or high
            preserve_formatting: Skip patterns that change line structure
            categories: Enabled pattern categories
            balance: Dual-goal balance (0 = efficiency, 1 = quality)

        Returns:
            Optimization result with ``success`` flag
        """
        self.obs.increment("tools.optimize_prompt")

        try:
            overridden = any(v is not None for v in (model, aggressiveness, preserve_formatting, categories))

            if balance is not None:
                config = self._override_config(model, aggressiveness, preserve_formatting, categories)
                engine = create_dual_optimizer(
                    balance, config, registry=self.registry, token_cache=self.token_cache
                )
                result = engine.optimize(text)
            elif overridden:
                config = self._override_config(model, aggressiveness, preserve_formatting, categories)
                result = PromptOptimizer(config, self.registry, self.token_cache).optimize(text)
            else:
                result = self.optimizer.optimize(text)

        except LeanPromptError as e:
            return self._error("optimize_prompt", e)

        response = result.to_dict()
        response["success"] = True
        return response

    def count_tokens(self, text: str, model: str = "gpt-3.5-turbo") -> dict[str, Any]:
        """
        Count tokens in text for a model.

        Args:
            text: Text to count
            model: Model name (e.g. "gpt-4", "claude-3-haiku")

        Returns:
            Token count with the tokenizer family used
        """
        self.obs.increment("tools.count_tokens")

        try:
            tokenizer = create_tokenizer(model, self.token_cache)
            token_count = tokenizer.count_tokens(text)
        except LeanPromptError as e:
            return self._error("count_tokens", e)

        return {
            "success": True,
            "token_count": token_count,
            "model": model,
            "tokenizer": resolve_tokenizer(model).family.value,
            "character_count": len(text),
        }

    def list_patterns(
        self,
        category: str = "all",
        aggressiveness: Aggressiveness | str | None = None,
    ) -> dict[str, Any]:
        """
        List registered patterns, highest priority first.

        Args:
            category: Category name or "all"
            aggressiveness: Only patterns active at this level

        Returns:
            Matching patterns and the known categories
        """
        self.obs.increment("tools.list_patterns")

        try:
            patterns = self.registry.get_all() if category == "all" else self.registry.get_by_category(category)
            if aggressiveness is not None:
                level = coerce_aggressiveness(aggressiveness)
                patterns = [p for p in patterns if matches_aggressiveness(p, level)]
        except LeanPromptError as e:
            return self._error("list_patterns", e)

        patterns = sorted(patterns, key=lambda p: p.priority, reverse=True)
        return {
            "success": True,
            "count": len(patterns),
            "categories": self.registry.get_categories(),
            "patterns": [p.to_dict() for p in patterns],
        }

    def pattern_effectiveness(self, limit: int = 10) -> dict[str, Any]:
        """
        Most effective patterns seen by the shared optimizer.

        Args:
            limit: Maximum number of patterns to return
        """
        self.obs.increment("tools.pattern_effectiveness")

        try:
            patterns = self.optimizer.get_most_effective_patterns(limit)
        except LeanPromptError as e:
            return self._error("pattern_effectiveness", e)

        return {
            "success": True,
            "tracking_enabled": self.optimizer.get_config().track_pattern_effectiveness,
            "patterns": [
                {
                    "id": p.id,
                    "category": p.category,
                    "description": p.description,
                    "metrics": p.effectiveness_metrics.to_dict(),
                }
                for p in patterns
            ],
        }

    def get_status(self, include_metrics: bool = False) -> dict[str, Any]:
        """
        Service status.

        Args:
            include_metrics: Include counters and histogram summaries
        """
        self.obs.increment("tools.get_status")
        config = self.optimizer.get_config()
        cache_stats = self.token_cache.get_stats()
        self.obs.gauge("token_cache.size", cache_stats["size"])
        self.obs.gauge("token_cache.hit_rate", cache_stats["hit_rate"])

        status: dict[str, Any] = {
            "success": True,
            "service": "leanprompt",
            "version": VERSION,
            "optimizer": {
                "model": config.model,
                "aggressiveness": config.aggressiveness.value,
                "preserve_formatting": config.preserve_formatting,
                "enabled_categories": config.enabled_categories,
                "active_patterns": len(self.optimizer.get_patterns()),
            },
            "registry": {
                "patterns": len(self.registry),
                "categories": self.registry.get_categories(),
            },
            "token_cache": cache_stats,
        }

        if include_metrics:
            status["metrics"] = self.obs.get_metrics()

        return status
