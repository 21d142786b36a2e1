"""
LeanPrompt — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the runtime.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import LeanPromptSettings

logger = logging.getLogger(__name__)

_config_instance: LeanPromptSettings | None = None

ENV_PREFIX = "LEANPROMPT_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = _env(name, str(default))
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be an integer",
            details={"variable": f"{ENV_PREFIX}{name}", "value": raw},
        ) from e


def _build_config_dict() -> dict[str, Any]:
    categories = [c.strip() for c in _env("ENABLED_CATEGORIES", "all").split(",") if c.strip()]

    return {
        "log_level": _env("LOG_LEVEL", "INFO").upper(),
        "optimizer": {
            "model": _env("MODEL", "gpt-3.5-turbo"),
            "aggressiveness": _env("AGGRESSIVENESS", "medium").lower(),
            "preserve_formatting": _env_bool("PRESERVE_FORMATTING", True),
            "enabled_categories": categories,
            "track_pattern_effectiveness": _env_bool("TRACK_EFFECTIVENESS", True),
            "include_performance_metrics": _env_bool("PERFORMANCE_METRICS", False),
        },
        "token_cache": {
            "max_size": _env_int("TOKEN_CACHE_SIZE", 2000),
            "hash_threshold": _env_int("TOKEN_CACHE_HASH_THRESHOLD", 100),
        },
        "observability": {
            "log_format": _env("LOG_FORMAT", "text").lower(),
            "enable_metrics": _env_bool("ENABLE_METRICS", True),
            "enable_tracing": _env_bool("ENABLE_TRACING", True),
        },
    }


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> LeanPromptSettings:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated LeanPromptSettings instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        load_dotenv(env_path, override=True)
    else:
        logger.debug("No .env file found, using environment variables only")

    config_dict = _build_config_dict()

    try:
        _config_instance = LeanPromptSettings(**config_dict)
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ConfigurationError(
            "Invalid configuration",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    logger.debug(
        "Configuration loaded",
        extra={
            "model": _config_instance.optimizer.model,
            "aggressiveness": _config_instance.optimizer.aggressiveness,
            "token_cache_size": _config_instance.token_cache.max_size,
        },
    )
    return _config_instance


def get_config() -> LeanPromptSettings:
    """
    Get the current configuration instance, loading it on first use.

    Returns:
        Current LeanPromptSettings instance
    """
    if _config_instance is None:
        return load_config()
    return _config_instance


def reload_config(env_file: str | None = None) -> LeanPromptSettings:
    """Force reload configuration from environment."""
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """Forget the loaded configuration (testing)."""
    global _config_instance
    _config_instance = None
