"""
LeanPrompt — Server

FastMCP server using stdio transport (Model Context Protocol).
Tool logic lives in PromptTools; this module only registers and validates.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from .config import get_config
from .observability import get_observability, setup_logging
from .tools import PromptTools
from .validation import validate_input
from .validation.tool_schemas import (
    CountTokensInput,
    GetStatusInput,
    ListPatternsInput,
    OptimizePromptInput,
    PatternEffectivenessInput,
)

logger = logging.getLogger(__name__)

_tools: PromptTools | None = None


def get_tools() -> PromptTools:
    """Get the server's PromptTools, creating them on first use."""
    global _tools
    if _tools is None:
        _tools = PromptTools()
    return _tools


def reset_tools() -> None:
    """Drop the server's PromptTools (for tests)."""
    global _tools
    _tools = None


@asynccontextmanager
async def server_lifespan(server: Any) -> Any:
    """Server lifespan manager (startup/shutdown)."""
    config = get_config()
    setup_logging(config.log_level, config.observability.log_format)
    get_tools()
    get_observability().event("server.started", {"model": config.optimizer.model})
    logger.info("LeanPrompt server started")
    yield
    logger.info("LeanPrompt server stopped")


mcp = FastMCP("LeanPrompt - Prompt Token Optimizer", lifespan=server_lifespan)


@mcp.tool()
@validate_input(OptimizePromptInput)
async def optimize_prompt(
    text: str,
    model: str | None = None,
    aggressiveness: str | None = None,
    preserve_formatting: bool | None = None,
    categories: list[str] | None = None,
    balance: float | None = None,
) -> dict[str, Any]:
    """
    Rewrite a prompt to use fewer tokens.

    Args:
        text: Prompt to optimize
        model: Model used for token counting (default: configured model)
        aggressiveness: low, medium or high (default: configured level)
        preserve_formatting: Skip patterns that change line structure
        categories: Enabled pattern categories (default: all)
        balance: 0-1 efficiency/quality balance; enables dual-goal optimization

    Returns:
        Optimized text, token counts and the patterns that were applied
    """
    return get_tools().optimize_prompt(
        text=text,
        model=model,
        aggressiveness=aggressiveness,
        preserve_formatting=preserve_formatting,
        categories=categories,
        balance=balance,
    )


@mcp.tool()
@validate_input(CountTokensInput)
async def count_tokens(text: str, model: str = "gpt-3.5-turbo") -> dict[str, Any]:
    """
    Count tokens in text for a model.

    Args:
        text: Text to count
        model: Model name (e.g. "gpt-4", "claude-3-haiku")
    """
    return get_tools().count_tokens(text=text, model=model)


@mcp.tool()
@validate_input(ListPatternsInput)
async def list_patterns(category: str = "all", aggressiveness: str | None = None) -> dict[str, Any]:
    """
    List registered rewrite patterns.

    Args:
        category: Category name or "all"
        aggressiveness: Only patterns active at this level
    """
    return get_tools().list_patterns(category=category, aggressiveness=aggressiveness)


@mcp.tool()
@validate_input(PatternEffectivenessInput)
async def pattern_effectiveness(limit: int = 10) -> dict[str, Any]:
    """
    Patterns ranked by average tokens saved.

    Args:
        limit: Maximum number of patterns to return
    """
    return get_tools().pattern_effectiveness(limit=limit)


@mcp.tool()
@validate_input(GetStatusInput)
async def get_status(include_metrics: bool = False) -> dict[str, Any]:
    """
    Service status: configuration, token cache statistics and metrics.

    Args:
        include_metrics: Include counters and histogram summaries
    """
    return get_tools().get_status(include_metrics=include_metrics)


def main() -> None:
    """Run the MCP server over stdio."""
    mcp.run()


if __name__ == "__main__":
    main()
