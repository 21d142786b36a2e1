"""
LeanPrompt — Token Count Cache

Bounded LRU map from (text, model) to token count.
Thread-safe; O(1) get/set/evict via OrderedDict ordering.
"""

import hashlib
import logging
import threading
from collections import OrderedDict
from typing import Any

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000
DEFAULT_HASH_THRESHOLD = 100


def _validate_max_size(max_size: Any) -> int:
    if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size <= 0:
        raise ConfigurationError(
            "Cache max size must be a positive integer",
            details={"max_size": max_size},
        )
    return max_size


class TokenCache:
    """
    LRU cache for token counts.

    Features:
    - Keys incorporate the model name so counts are never conflated across models
    - Long texts are keyed by a SHA-256 digest instead of the verbatim text
    - Both get (on hit) and set promote an entry to most-recently-used
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        hash_threshold: int = DEFAULT_HASH_THRESHOLD,
    ):
        """
        Initialize token cache.

        Args:
            max_size: Maximum number of entries (LRU eviction when exceeded)
            hash_threshold: Texts longer than this are stored under a content hash

        Raises:
            ConfigurationError: If max_size is not a positive integer
        """
        self.max_size = _validate_max_size(max_size)
        self.hash_threshold = hash_threshold

        self._cache: OrderedDict[str, int] = OrderedDict()

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._evictions = 0

        self._lock = threading.Lock()

    def _make_key(self, text: str, model: str) -> str:
        """Create model-scoped cache key."""
        if len(text) > self.hash_threshold:
            digest = hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()
            return f"{model}:{digest}"
        return f"{model}:{text}"

    def get(self, text: str, model: str) -> int | None:
        """Return the cached count, or None on miss or degenerate keys."""
        if not text or not model:
            return None

        key = self._make_key(text, model)
        with self._lock:
            if key not in self._cache:
                self._misses += 1
                return None

            # Mark as recently used
            self._cache.move_to_end(key)
            self._hits += 1
            return self._cache[key]

    def set(self, text: str, model: str, count: int) -> None:
        """Store a count. Empty text or model is ignored."""
        if not text or not model:
            return

        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ConfigurationError(
                "Token count must be a non-negative integer",
                details={"count": count, "model": model},
            )

        key = self._make_key(text, model)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            elif len(self._cache) >= self.max_size:
                evicted_key, _ = self._cache.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted key from token cache: {evicted_key[:80]}")

            self._cache[key] = count
            self._sets += 1

    def clear(self) -> None:
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
        logger.info(f"Cleared {count} entries from token cache")

    def size(self) -> int:
        return len(self._cache)

    def __len__(self) -> int:
        return len(self._cache)

    def set_max_size(self, max_size: int) -> None:
        """Resize the cache, evicting least-recently-used entries immediately."""
        max_size = _validate_max_size(max_size)
        with self._lock:
            self.max_size = max_size
            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)
                self._evictions += 1

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._hits + self._misses
        hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

        return {
            "size": len(self._cache),
            "max_size": self.max_size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 2),
            "sets": self._sets,
            "evictions": self._evictions,
        }


# Shared cache used by the tokenizer layer
_shared_cache: TokenCache | None = None


def get_token_cache() -> TokenCache:
    """
    Get the shared token cache, creating it from configuration on first use.

    Returns:
        Shared TokenCache instance
    """
    global _shared_cache

    if _shared_cache is None:
        from ..config import get_config

        config = get_config().token_cache
        _shared_cache = TokenCache(
            max_size=config.max_size,
            hash_threshold=config.hash_threshold,
        )

    return _shared_cache


def reset_token_cache() -> None:
    """Drop the shared cache (testing/reconfiguration)."""
    global _shared_cache
    _shared_cache = None
