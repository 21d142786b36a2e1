"""
LeanPrompt — Cache Module

Usage:
    from leanprompt.cache import TokenCache, get_token_cache

    cache = get_token_cache()
    cache.set("Hello world", "gpt-4", 2)
    cache.get("Hello world", "gpt-4")
"""

from .token_cache import TokenCache, get_token_cache, reset_token_cache

__all__ = [
    "TokenCache",
    "get_token_cache",
    "reset_token_cache",
]
