"""
LeanPrompt — Observability Monitoring

In-process metrics collection and structured logging.
Counters, gauges and histograms are kept in memory and can be read back
through get_metrics() (used by the MCP status tool and the tests).
"""

import contextvars
import json
import logging
import threading
import time
from collections import defaultdict
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

# Trace ID context variable
_trace_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("trace_id", default=None)


def _metric_key(metric: str, tags: dict[str, str] | None) -> str:
    if not tags:
        return metric
    labels = ",".join(f"{k}={v}" for k, v in sorted(tags.items()))
    return f"{metric}{{{labels}}}"


class ObservabilityAdapter:
    """
    In-memory observability adapter.

    Provides:
    - Metrics (counters, gauges, histograms)
    - Span timing with trace IDs
    - Structured event logging
    """

    def __init__(self, enable_metrics: bool = True, enable_tracing: bool = True):
        """
        Initialize observability adapter.

        Args:
            enable_metrics: Enable metrics collection
            enable_tracing: Enable span timing
        """
        self.enable_metrics = enable_metrics
        self.enable_tracing = enable_tracing
        self.logger = logging.getLogger("leanprompt.observability")

        self._counters: dict[str, float] = defaultdict(float)
        self._gauges: dict[str, float] = {}
        self._histograms: dict[str, list[float]] = defaultdict(list)
        self._lock = threading.Lock()

    def increment(
        self,
        metric: str,
        value: float = 1.0,
        tags: dict[str, str] | None = None,
    ) -> None:
        """
        Increment a counter metric.

        Args:
            metric: Metric name (e.g., "tokenizer.fallback")
            value: Value to increment by
            tags: Optional metric tags/labels
        """
        if not self.enable_metrics:
            return

        with self._lock:
            self._counters[_metric_key(metric, tags)] += value

    def gauge(
        self,
        metric: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric."""
        if not self.enable_metrics:
            return

        with self._lock:
            self._gauges[_metric_key(metric, tags)] = value

    def histogram(
        self,
        metric: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a histogram sample (latencies, sizes, etc.)."""
        if not self.enable_metrics:
            return

        with self._lock:
            self._histograms[_metric_key(metric, tags)].append(value)

    def event(self, name: str, payload: dict[str, Any]) -> None:
        """
        Record an event.

        Args:
            name: Event name
            payload: Event data
        """
        self.logger.info(
            f"Event: {name}",
            extra={
                "event_name": name,
                "event_payload": payload,
                "trace_id": self.get_trace_id(),
            },
        )

    @contextmanager
    def trace(self, span_name: str, tags: dict[str, str] | None = None) -> Generator[None, None, None]:
        """
        Context manager for timing a span.

        Example:
            with observability.trace("optimizer.optimize"):
                result = optimizer.optimize(text)
        """
        if not self.enable_tracing:
            yield
            return

        start_time = time.perf_counter()
        tags = tags or {}

        try:
            yield
        except Exception as e:
            self.logger.error(
                f"Span error: {span_name}",
                extra={
                    "span_name": span_name,
                    "trace_id": self.get_trace_id(),
                    "error": str(e),
                },
            )
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.histogram("span.duration", duration_ms, tags={"span_name": span_name, **tags})

    def get_trace_id(self) -> str | None:
        return _trace_id_ctx.get()

    def generate_trace_id(self) -> str:
        """Generate a new trace ID and set it in context."""
        trace_id = str(uuid4())
        _trace_id_ctx.set(trace_id)
        return trace_id

    def get_counter(self, metric: str, tags: dict[str, str] | None = None) -> float:
        return self._counters.get(_metric_key(metric, tags), 0.0)

    def get_metrics(self) -> dict[str, Any]:
        """
        Snapshot of all collected metrics.

        Histograms are summarized as count/sum/min/max/avg.
        """
        with self._lock:
            histograms = {
                name: {
                    "count": len(values),
                    "sum": sum(values),
                    "min": min(values),
                    "max": max(values),
                    "avg": sum(values) / len(values),
                }
                for name, values in self._histograms.items()
                if values
            }
            return {
                "counters": dict(self._counters),
                "gauges": dict(self._gauges),
                "histograms": histograms,
            }

    def clear_metrics(self) -> None:
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
            self._histograms.clear()


_RESERVED_ATTRS = frozenset(
    (
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        trace_id = _trace_id_ctx.get()
        if trace_id:
            log_data["trace_id"] = trace_id

        # Extra fields passed via logger.x(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """
    Configure the ``leanprompt`` logger hierarchy.

    Args:
        level: Log level name
        log_format: "json" for JSONFormatter output, anything else for plain text
    """
    logger = logging.getLogger("leanprompt")
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level.upper())


# Global observability adapter instance (singleton)
_observability_adapter: ObservabilityAdapter | None = None


def get_observability() -> ObservabilityAdapter:
    """
    Get the global observability adapter instance.

    Returns:
        Global ObservabilityAdapter instance
    """
    global _observability_adapter

    if _observability_adapter is None:
        from ..config import get_config

        config = get_config().observability
        _observability_adapter = ObservabilityAdapter(
            enable_metrics=config.enable_metrics,
            enable_tracing=config.enable_tracing,
        )

    return _observability_adapter


def reset_observability() -> None:
    """Reset global observability adapter (for testing)."""
    global _observability_adapter
    _observability_adapter = None
