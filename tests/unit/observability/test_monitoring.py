"""
Unit Tests for Observability

Tests the in-memory metrics adapter, span timing and JSON logging.
"""

import json
import logging

import pytest

from leanprompt.config import reset_config
from leanprompt.observability import (
    JSONFormatter,
    ObservabilityAdapter,
    get_observability,
    reset_observability,
    setup_logging,
)


class TestObservabilityAdapter:
    """Tests for ObservabilityAdapter."""

    @pytest.fixture
    def adapter(self) -> ObservabilityAdapter:
        return ObservabilityAdapter()

    def test_counters(self, adapter):
        adapter.increment("optimizer.runs")
        adapter.increment("optimizer.runs", 2)
        adapter.increment("optimizer.runs", tags={"optimizer": "DualOptimizer"})

        assert adapter.get_counter("optimizer.runs") == 3
        assert adapter.get_counter("optimizer.runs", {"optimizer": "DualOptimizer"}) == 1
        assert adapter.get_counter("missing") == 0

    def test_tag_order_does_not_matter(self, adapter):
        adapter.increment("m", tags={"a": "1", "b": "2"})
        assert adapter.get_counter("m", {"b": "2", "a": "1"}) == 1

    def test_gauges_and_histograms(self, adapter):
        adapter.gauge("cache.size", 10)
        adapter.histogram("optimizer.tokens_saved", 2)
        adapter.histogram("optimizer.tokens_saved", 6)

        metrics = adapter.get_metrics()
        assert metrics["gauges"]["cache.size"] == 10
        summary = metrics["histograms"]["optimizer.tokens_saved"]
        assert summary == {"count": 2, "sum": 8, "min": 2, "max": 6, "avg": 4.0}

    def test_metrics_disabled(self):
        adapter = ObservabilityAdapter(enable_metrics=False)
        adapter.increment("m")
        adapter.histogram("h", 1)

        assert adapter.get_metrics() == {"counters": {}, "gauges": {}, "histograms": {}}

    def test_trace_records_duration(self, adapter):
        with adapter.trace("optimizer.optimize", tags={"optimizer": "PatternOptimizer"}):
            pass

        histograms = adapter.get_metrics()["histograms"]
        key = "span.duration{optimizer=PatternOptimizer,span_name=optimizer.optimize}"
        assert histograms[key]["count"] == 1

    def test_trace_reraises(self, adapter):
        with pytest.raises(ValueError):
            with adapter.trace("failing"):
                raise ValueError("boom")

        assert adapter.get_metrics()["histograms"]["span.duration{span_name=failing}"]["count"] == 1

    def test_tracing_disabled(self):
        adapter = ObservabilityAdapter(enable_tracing=False)
        with adapter.trace("span"):
            pass
        assert adapter.get_metrics()["histograms"] == {}

    def test_trace_ids(self, adapter):
        trace_id = adapter.generate_trace_id()
        assert adapter.get_trace_id() == trace_id

    def test_clear_metrics(self, adapter):
        adapter.increment("m")
        adapter.clear_metrics()
        assert adapter.get_counter("m") == 0


class TestSingleton:
    """Tests for the global adapter."""

    def test_singleton(self):
        assert get_observability() is get_observability()

    def test_reads_configuration(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LEANPROMPT_ENABLE_METRICS", "false")
        reset_config()
        reset_observability()

        assert get_observability().enable_metrics is False


class TestLogging:
    """Tests for logging setup."""

    def test_json_formatter(self):
        record = logging.LogRecord(
            name="leanprompt.test",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="Skipping pattern %s",
            args=("broken",),
            exc_info=None,
        )
        record.pattern_id = "broken"

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["message"] == "Skipping pattern broken"
        assert data["pattern_id"] == "broken"
        assert data["timestamp"].endswith("Z")

    def test_setup_logging_json(self):
        setup_logging("debug", "json")
        logger = logging.getLogger("leanprompt")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_logging_replaces_handlers(self):
        setup_logging("INFO", "text")
        setup_logging("INFO", "text")
        logger = logging.getLogger("leanprompt")

        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
