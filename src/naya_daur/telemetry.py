"""Scoped timings and counters for HTTP calls.

Disabled telemetry costs one shared no-op object. When enabled, every scope
opened with ``tele("name")`` is timed under a dotted path built from the
enclosing scopes (``grounded.retrieve.phase1.backoff.fetch``) and handed to
each reporter.
"""

from collections import deque
from collections.abc import Iterator
from contextvars import ContextVar, Token
from dataclasses import dataclass
import logging
import os
import time
from types import TracebackType
from typing import Any, Protocol, Self, TypeAlias, runtime_checkable

log = logging.getLogger(__name__)

_active_path: ContextVar[tuple[str, ...]] = ContextVar("telemetry_path", default=())

_ENV_ENABLED = os.getenv("GEMINI_TELEMETRY") == "1" or os.getenv("DEBUG") == "1"


@runtime_checkable
class TelemetryReporter(Protocol):
    """Anything that accepts finished timings and metric samples."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """Accepts every telemetry call and records nothing."""

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _Scope:
    """One timed section; pushes its name onto the active path while open."""

    __slots__ = ("_metadata", "_name", "_owner", "_started", "_token")

    def __init__(self, owner: "_ActiveTelemetryContext", name: str, metadata: dict):
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")
        self._owner = owner
        self._name = name
        self._metadata = metadata
        self._started = 0.0
        self._token: Token[tuple[str, ...]] | None = None

    def __enter__(self) -> "_ActiveTelemetryContext":
        self._token = _active_path.set((*_active_path.get(), self._name))
        self._started = time.perf_counter()
        return self._owner

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        elapsed = time.perf_counter() - self._started
        path = _active_path.get()
        if self._token is not None:
            _active_path.reset(self._token)
        parents = path[:-1]
        self._owner._dispatch(
            "record_timing",
            ".".join(path),
            elapsed,
            {
                "depth": len(parents),
                "parent_scope": ".".join(parents) or None,
                "failed": exc_type is not None,
                **self._metadata,
            },
        )


class _ActiveTelemetryContext:
    """Forwards scopes and metrics to a fixed set of reporters."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(self, name: str, **metadata: Any) -> _Scope:
        return _Scope(self, name, metadata)

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record ``value`` under ``name`` inside the currently open scope."""
        path = _active_path.get()
        self._dispatch(
            "record_metric",
            ".".join((*path, name)),
            value,
            {"depth": len(path), "parent_scope": ".".join(path) or None, **metadata},
        )

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        self.metric(name, increment, metric_type="counter", **metadata)

    def _dispatch(
        self, method: str, scope: str, value: Any, metadata: dict[str, Any]
    ) -> None:
        # A broken reporter must never fail the request being measured.
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(scope, value, **metadata)
            except Exception:
                log.exception(
                    "Telemetry reporter %s failed on %s", type(reporter).__name__, scope
                )


_NO_OP_SINGLETON = _NoOpTelemetryContext()

TelemetryContextProtocol: TypeAlias = _ActiveTelemetryContext | _NoOpTelemetryContext


def TelemetryContext(  # noqa: N802
    *reporters: TelemetryReporter, enabled: bool | None = None
) -> TelemetryContextProtocol:
    """Return an active context, or the shared no-op one.

    ``enabled=None`` defers to ``GEMINI_TELEMETRY=1`` / ``DEBUG=1``. Without
    reporters the result is always the no-op context.
    """
    if reporters and (_ENV_ENABLED if enabled is None else enabled):
        return _ActiveTelemetryContext(*reporters)
    return _NO_OP_SINGLETON


class SimpleReporter:
    """Keeps recent samples in memory and renders them as text.

    Each scope holds at most ``max_entries_per_scope`` samples.
    """

    def __init__(self, max_entries_per_scope: int = 1000):
        self.max_entries = max_entries_per_scope
        self.timings: dict[str, deque[tuple[float, dict[str, Any]]]] = {}
        self.metrics: dict[str, deque[tuple[Any, dict[str, Any]]]] = {}

    def _bucket(self, store: dict[str, deque], scope: str) -> deque:
        return store.setdefault(scope, deque(maxlen=self.max_entries))

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        self._bucket(self.timings, scope).append((duration, metadata))

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        self._bucket(self.metrics, scope).append((value, metadata))

    def metric_total(self, scope: str) -> float:
        """Sum of the numeric samples recorded under ``scope``."""
        return sum(
            value
            for value, _ in self.metrics.get(scope, ())
            if isinstance(value, int | float)
        )

    def get_report(self) -> str:
        lines = ["Telemetry report", "", "Timings:"]
        lines.extend(self._timing_lines())
        if self.metrics:
            lines += ["", "Metrics:"]
            for scope in sorted(self.metrics):
                samples = len(self.metrics[scope])
                lines.append(
                    f"  {scope:<44} {samples:>4} samples, total {self.metric_total(scope):g}"
                )
        return "\n".join(lines)

    def _timing_lines(self) -> Iterator[str]:
        """Indent scopes by depth; parents that were never timed get a header."""
        headed: set[str] = set()
        for scope in sorted(self.timings):
            parts = scope.split(".")
            for depth in range(len(parts) - 1):
                parent = ".".join(parts[: depth + 1])
                if parent not in headed and parent not in self.timings:
                    headed.add(parent)
                    yield f"  {'  ' * depth}{parts[depth]}:"
            durations = [duration for duration, _ in self.timings[scope]]
            total = sum(durations)
            indent = "  " * (len(parts) - 1)
            yield (
                f"  {indent}{parts[-1]:<30} {len(durations):>4} calls, "
                f"avg {total / len(durations):.4f}s, total {total:.4f}s"
            )
