"""
Service Telemetry
=================

Optional span instrumentation around service operations.

Services receive a ``ServiceObserver`` at construction time. The default
``NullObserver`` records nothing, so instrumentation never changes the
control flow of the operation it wraps.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Set

from support_desk.shared.infrastructure.grafana import GrafanaOTLPExporter
from support_desk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class SpanStatus(str):
    """Span completion states."""
    UNSET = "unset"
    OK = "ok"
    ERROR = "error"


class Span:
    """A single timed operation with tags."""

    def __init__(self, name: str, tags: Optional[Dict[str, Any]] = None):
        self.name = name
        self.tags: Dict[str, Any] = dict(tags or {})
        self.status = SpanStatus.UNSET
        self.status_description: Optional[str] = None
        self.exception: Optional[BaseException] = None
        self.started_at = time.perf_counter()
        self.latency_ms: Optional[int] = None

    def set_tag(self, key: str, value: Any) -> None:
        if value is not None:
            self.tags[key] = value

    def set_status(self, status: str, description: Optional[str] = None) -> None:
        self.status = status
        self.status_description = description

    def record_exception(self, exc: BaseException) -> None:
        self.exception = exc
        self.tags["exception.type"] = type(exc).__name__

    def finish(self) -> None:
        self.latency_ms = int((time.perf_counter() - self.started_at) * 1000)


class ServiceObserver(ABC):
    """Receives spans emitted around service operations."""

    @contextmanager
    def span(self, name: str, **tags: Any) -> Iterator[Span]:
        """
        Open a span for the duration of the ``with`` block.

        Exceptions raised inside the block are recorded on the span and
        re-raised unchanged.
        """
        span = Span(name, tags)
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(SpanStatus.ERROR, str(exc))
            raise
        else:
            if span.status == SpanStatus.UNSET:
                span.set_status(SpanStatus.OK)
        finally:
            span.finish()
            try:
                self.on_span_end(span)
            except Exception as e:
                logger.warning(
                    "Telemetry observer failed",
                    extra={"span": span.name, "error": str(e)}
                )

    @abstractmethod
    def on_span_end(self, span: Span) -> None:
        """Handle a completed span."""


class NullObserver(ServiceObserver):
    """Observer that discards every span."""

    def on_span_end(self, span: Span) -> None:
        return None


class RecordingObserver(ServiceObserver):
    """Keeps completed spans in memory; useful for diagnostics and tests."""

    def __init__(self):
        self.spans: list[Span] = []

    def on_span_end(self, span: Span) -> None:
        self.spans.append(span)


class GrafanaObserver(ServiceObserver):
    """
    Pushes span latency to Grafana OTLP.

    Export runs as a background task on the current event loop; the
    operation that produced the span never waits for it.
    """

    def __init__(self, exporter: GrafanaOTLPExporter):
        self._exporter = exporter
        self._pending: Set[asyncio.Task] = set()

    def on_span_end(self, span: Span) -> None:
        if not self._exporter.is_enabled():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        task = loop.create_task(
            self._exporter.export_operation_latency(
                operation=span.name,
                latency_ms=span.latency_ms or 0,
                status=span.status,
                attributes=span.tags,
            )
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for in-flight exports; called on shutdown."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


NULL_OBSERVER = NullObserver()
