"""
LeanPrompt — Test Configuration and Shared Fixtures

Every test starts from a fresh configuration, observability adapter and
shared token cache so metrics and cached counts never leak between tests.
"""

import os
from collections.abc import Generator

import pytest

from leanprompt.cache import TokenCache, reset_token_cache
from leanprompt.config import reset_config
from leanprompt.observability import get_observability, reset_observability

# Keep a developer's shell environment out of the tests
for _name in [name for name in os.environ if name.startswith("LEANPROMPT_")]:
    del os.environ[_name]

# Heuristic tokenizer, deterministic with or without tiktoken installed
TEST_MODEL = "claude-3-haiku"


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset configuration, observability and the shared token cache."""
    reset_config()
    reset_observability()
    reset_token_cache()
    yield
    reset_config()
    reset_observability()
    reset_token_cache()


@pytest.fixture
def token_cache() -> TokenCache:
    """Private token cache for one test."""
    return TokenCache(max_size=100)


@pytest.fixture
def obs():
    """The observability adapter the code under test will report to."""
    return get_observability()


@pytest.fixture
def model() -> str:
    return TEST_MODEL
