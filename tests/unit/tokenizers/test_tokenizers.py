"""
Unit Tests for Tokenizers

Tests model resolution, the heuristic and Claude estimators, the tiktoken
backend (with a mocked tiktoken module) and the fallback path.
"""

import math
from unittest.mock import Mock, patch

import pytest

from leanprompt.cache import TokenCache
from leanprompt.errors import ConfigurationError
from leanprompt.tokenizers import (
    CachedTokenizer,
    ClaudeTokenizer,
    OpenAITokenizer,
    SimpleTokenizer,
    TokenizerFamily,
    create_backend,
    create_tokenizer,
    estimate_tokens,
    heuristic_count,
    resolve_tokenizer,
)
from leanprompt.tokenizers.simple import is_probably_code, non_ascii_ratio


class TestResolveTokenizer:
    """Tests for model name resolution."""

    @pytest.mark.parametrize(
        "model",
        ["gpt-4", "gpt-3.5-turbo", "GPT-4o", "text-davinci-003", "text-embedding-3-small", "babbage-002"],
    )
    def test_openai_models(self, model):
        choice = resolve_tokenizer(model)
        assert choice.family == TokenizerFamily.OPENAI
        assert choice.backend_model == model.lower()

    @pytest.mark.parametrize("model", ["claude-3-haiku", "claude-2.1", "Claude-Instant-1"])
    def test_claude_models(self, model):
        assert resolve_tokenizer(model).family == TokenizerFamily.CLAUDE

    @pytest.mark.parametrize("model", ["gemini-pro", "mistral-large", "llama-3-70b", "mixtral-8x7b"])
    def test_approximated_models_use_default_openai_encoding(self, model):
        choice = resolve_tokenizer(model)
        assert choice.family == TokenizerFamily.OPENAI
        assert choice.backend_model == "gpt-3.5-turbo"

    @pytest.mark.parametrize("model", ["unknown-model", "command-r", "my-local-model"])
    def test_unknown_models(self, model):
        assert resolve_tokenizer(model).family == TokenizerFamily.SIMPLE

    def test_create_backend_types(self):
        assert isinstance(create_backend("gpt-4"), OpenAITokenizer)
        assert isinstance(create_backend("claude-3-opus"), ClaudeTokenizer)
        assert isinstance(create_backend("unknown-model"), SimpleTokenizer)

    @pytest.mark.parametrize("model", ["", "   ", None])
    def test_empty_model_rejected(self, model):
        with pytest.raises(ConfigurationError):
            create_tokenizer(model)


class TestHeuristics:
    """Tests for the heuristic estimators."""

    def test_estimate_tokens(self):
        assert estimate_tokens("") == 0
        assert estimate_tokens("abc") == 1
        assert estimate_tokens("a" * 40) == 10

    def test_is_probably_code(self):
        assert is_probably_code("def main():\n    return 1")
        assert not is_probably_code("Tell me about the weather.")

    def test_non_ascii_ratio(self):
        assert non_ascii_ratio("") == 0.0
        assert non_ascii_ratio("abcd") == 0.0
        assert non_ascii_ratio("日本") == 1.0

    def test_english_text(self):
        text = "Tell me about the weather."
        # 26 chars / 4 * 0.5 + 5 words * 0.5 + 1 special * 0.3
        expected = math.ceil(26 / 4 * 0.5 + 5 * 0.5 + 0.3)
        assert heuristic_count(text) == expected

    def test_non_ascii_text(self):
        text = "こんにちは世界"
        assert heuristic_count(text) == math.ceil(len(text) / 2)

    def test_code_text(self):
        text = "def add(a, b):\n    return a + b"
        assert heuristic_count(text) == math.ceil(math.ceil(len(text) / 4.5) + 0.5)

    def test_minimum_one_token(self):
        assert heuristic_count("a") == 1

    def test_empty_text(self):
        assert heuristic_count("") == 0


class TestClaudeTokenizer:
    """Tests for the Claude approximation."""

    def test_claude3_detection(self):
        assert ClaudeTokenizer("claude-3-haiku").is_claude3
        assert ClaudeTokenizer("claude-sonnet-4").is_claude3
        assert not ClaudeTokenizer("claude-2.1").is_claude3

    def test_claude3_count(self):
        tokenizer = ClaudeTokenizer("claude-3-haiku")
        # Tell, me, about, the, weather (2), 4 spaces, "."
        assert tokenizer.count_tokens("Tell me about the weather.") == 11

    def test_claude3_long_non_alpha_piece(self):
        tokenizer = ClaudeTokenizer("claude-3-haiku")
        assert tokenizer.count_tokens("abc123xyz") == 3

    def test_legacy_count(self):
        tokenizer = ClaudeTokenizer("claude-2.1")
        # "tokenization" is 12 chars -> 3 chunks of 4
        assert tokenizer.count_tokens("tokenization") == 3

    def test_empty_and_none(self):
        tokenizer = ClaudeTokenizer("claude-3-haiku")
        assert tokenizer.count_tokens("") == 0
        assert tokenizer.count_tokens(None) == 0
        assert tokenizer.get_model() == "claude-3-haiku"


class TestOpenAITokenizer:
    """Tests for the tiktoken backend with tiktoken mocked out."""

    def test_counts_with_tiktoken(self):
        encoding = Mock()
        encoding.encode.return_value = [1, 2, 3]
        fake_tiktoken = Mock()
        fake_tiktoken.encoding_for_model.return_value = encoding

        with patch("leanprompt.tokenizers.openai.tiktoken", fake_tiktoken):
            tokenizer = OpenAITokenizer("gpt-4")
            assert tokenizer.count_tokens("Hello world") == 3

        fake_tiktoken.encoding_for_model.assert_called_once_with("gpt-4")
        encoding.encode.assert_called_once_with("Hello world", disallowed_special=())

    def test_unknown_model_uses_default_encoding(self):
        encoding = Mock()
        encoding.encode.return_value = [1]
        fake_tiktoken = Mock()
        fake_tiktoken.encoding_for_model.side_effect = KeyError("gpt-99")
        fake_tiktoken.get_encoding.return_value = encoding

        with patch("leanprompt.tokenizers.openai.tiktoken", fake_tiktoken):
            assert OpenAITokenizer("gpt-99").count_tokens("hi") == 1

        fake_tiktoken.get_encoding.assert_called_once_with("cl100k_base")

    def test_legacy_model_uses_p50k(self):
        encoding = Mock()
        encoding.encode.return_value = [1, 2]
        fake_tiktoken = Mock()
        fake_tiktoken.get_encoding.return_value = encoding

        with patch("leanprompt.tokenizers.openai.tiktoken", fake_tiktoken):
            assert OpenAITokenizer("text-davinci-003").count_tokens("hi there") == 2

        fake_tiktoken.get_encoding.assert_called_once_with("p50k_base")
        fake_tiktoken.encoding_for_model.assert_not_called()

    def test_missing_tiktoken_falls_back_to_heuristic(self, obs):
        with patch("leanprompt.tokenizers.openai.tiktoken", None):
            tokenizer = OpenAITokenizer("gpt-4")
            count = tokenizer.count_tokens("Tell me about the weather.")

        assert count == heuristic_count("Tell me about the weather.")
        assert obs.get_counter("tokenizer.fallback", {"tokenizer": "OpenAITokenizer"}) == 1

    def test_load_failure_is_remembered(self):
        fake_tiktoken = Mock()
        fake_tiktoken.encoding_for_model.side_effect = OSError("no network")

        with patch("leanprompt.tokenizers.openai.tiktoken", fake_tiktoken):
            tokenizer = OpenAITokenizer("gpt-4")
            tokenizer.count_tokens("one")
            tokenizer.count_tokens("two")

        assert fake_tiktoken.encoding_for_model.call_count == 1


class TestFallback:
    """Tests for the never-raise contract."""

    def test_failing_backend_falls_back(self, obs):
        tokenizer = SimpleTokenizer("unknown-model")
        with patch.object(SimpleTokenizer, "_count", side_effect=RuntimeError("boom")):
            assert tokenizer.count_tokens("a" * 40) == 10

        assert obs.get_counter("tokenizer.fallback", {"tokenizer": "SimpleTokenizer"}) == 1

    def test_negative_backend_count_clamped(self):
        tokenizer = SimpleTokenizer("unknown-model")
        with patch.object(SimpleTokenizer, "_count", return_value=-5):
            assert tokenizer.count_tokens("text") == 0


class TestCachedTokenizer:
    """Tests for cache integration."""

    def test_counts_are_cached(self, token_cache: TokenCache):
        tokenizer = create_tokenizer("claude-3-haiku", token_cache)
        assert isinstance(tokenizer, CachedTokenizer)

        with patch.object(ClaudeTokenizer, "_count", return_value=7) as counted:
            assert tokenizer.count_tokens("Hello world") == 7
            assert tokenizer.count_tokens("Hello world") == 7

        counted.assert_called_once()
        assert token_cache.get("Hello world", "claude-3-haiku") == 7

    def test_empty_text_not_cached(self, token_cache: TokenCache):
        tokenizer = create_tokenizer("claude-3-haiku", token_cache)
        assert tokenizer.count_tokens("") == 0
        assert len(token_cache) == 0
