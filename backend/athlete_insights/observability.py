"""Lightweight observability helpers (logging + metrics)."""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections import defaultdict
from contextvars import ContextVar
from threading import Lock
from typing import Iterable, Protocol

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from athlete_insights.core.config import get_settings

REQUEST_ID_HEADER = "X-Request-ID"
UNMATCHED_ROUTE = "/__unknown__"

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
logger = logging.getLogger(__name__)

DEFAULT_BUCKETS_MS = [5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000]


class RequestIdFilter(logging.Filter):
    """Stamp every log record with the current request id ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler if the host process has not configured one.

    Root handlers get a ``RequestIdFilter`` so log lines emitted while serving
    a request carry its id.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())


class MetricsBackend(Protocol):
    """Metrics backend interface."""

    def observe_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        ...

    def observe_provider_fetch(self, provider: str, success: bool, duration_ms: float) -> None:
        ...

    def render_prometheus(self) -> str:
        ...


class MetricsCollector:
    """In-process metrics collector with Prometheus text output."""

    def __init__(self, buckets_ms: Iterable[int] | None = None) -> None:
        self._lock = Lock()
        self._request_counts: dict[tuple[str, str, str], int] = defaultdict(int)
        self._duration_sum_ms: dict[tuple[str, str], float] = defaultdict(float)
        self._duration_count: dict[tuple[str, str], int] = defaultdict(int)
        self._duration_buckets: dict[tuple[str, str], dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self._fetch_counts: dict[tuple[str, str], int] = defaultdict(int)
        self._fetch_duration_sum_ms: dict[tuple[str, str], float] = defaultdict(float)
        self._buckets_ms = list(buckets_ms or DEFAULT_BUCKETS_MS)

    def observe_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        """Record a single request observation."""
        count_key = (method, path, str(status_code))
        duration_key = (method, path)
        bucket_key = self._bucket_for(duration_ms)

        with self._lock:
            self._request_counts[count_key] += 1
            self._duration_sum_ms[duration_key] += duration_ms
            self._duration_count[duration_key] += 1
            self._duration_buckets[duration_key][bucket_key] += 1

    def observe_provider_fetch(self, provider: str, success: bool, duration_ms: float) -> None:
        """Record one per-athlete provider fetch."""
        status = "success" if success else "error"
        with self._lock:
            self._fetch_counts[(provider, status)] += 1
            self._fetch_duration_sum_ms[(provider, status)] += duration_ms

    def fetch_count(self, provider: str, success: bool) -> int:
        """Number of fetches observed for a provider and outcome."""
        status = "success" if success else "error"
        with self._lock:
            return self._fetch_counts.get((provider, status), 0)

    def render_prometheus(self) -> str:
        """Render metrics in Prometheus text format."""
        lines: list[str] = [
            "# HELP http_requests_total Total HTTP requests",
            "# TYPE http_requests_total counter",
        ]
        with self._lock:
            for (method, path, status), count in sorted(self._request_counts.items()):
                lines.append(
                    f'http_requests_total{{method="{method}",path="{path}",status="{status}"}} {count}'
                )

            lines.extend(
                [
                    "# HELP http_request_duration_ms Request duration in milliseconds",
                    "# TYPE http_request_duration_ms histogram",
                ]
            )
            for (method, path), total in sorted(self._duration_sum_ms.items()):
                buckets = self._duration_buckets[(method, path)]
                cumulative = 0
                for bound in self._buckets_ms:
                    cumulative += buckets.get(str(bound), 0)
                    lines.append(
                        "http_request_duration_ms_bucket"
                        f'{{method="{method}",path="{path}",le="{bound}"}} {cumulative}'
                    )
                cumulative += buckets.get("+Inf", 0)
                lines.append(
                    "http_request_duration_ms_bucket"
                    f'{{method="{method}",path="{path}",le="+Inf"}} {cumulative}'
                )
                count = self._duration_count[(method, path)]
                lines.append(
                    f'http_request_duration_ms_sum{{method="{method}",path="{path}"}} {total:.2f}'
                )
                lines.append(
                    f'http_request_duration_ms_count{{method="{method}",path="{path}"}} {count}'
                )

            lines.extend(
                [
                    "# HELP provider_fetches_total Per-athlete provider fetches",
                    "# TYPE provider_fetches_total counter",
                ]
            )
            for (provider, status), count in sorted(self._fetch_counts.items()):
                lines.append(
                    f'provider_fetches_total{{provider="{provider}",status="{status}"}} {count}'
                )

            lines.extend(
                [
                    "# HELP provider_fetch_duration_ms_sum Total provider fetch time",
                    "# TYPE provider_fetch_duration_ms_sum counter",
                ]
            )
            for (provider, status), total in sorted(self._fetch_duration_sum_ms.items()):
                lines.append(
                    "provider_fetch_duration_ms_sum"
                    f'{{provider="{provider}",status="{status}"}} {total:.2f}'
                )
        return "\n".join(lines) + "\n"

    def _bucket_for(self, duration_ms: float) -> str:
        for bound in self._buckets_ms:
            if duration_ms <= bound:
                return str(bound)
        return "+Inf"


class PrometheusMetrics:
    """Prometheus client-based metrics backend."""

    def __init__(self, buckets_ms: Iterable[int]) -> None:
        from prometheus_client import CollectorRegistry, Counter, Histogram

        self._registry = CollectorRegistry()
        self._buckets_ms = list(buckets_ms)

        self._http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "path", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "Request duration in milliseconds",
            ["method", "path"],
            buckets=self._buckets_ms,
            registry=self._registry,
        )
        self._provider_fetches_total = Counter(
            "provider_fetches_total",
            "Per-athlete provider fetches",
            ["provider", "status"],
            registry=self._registry,
        )
        self._provider_fetch_duration_ms = Histogram(
            "provider_fetch_duration_ms",
            "Provider fetch duration in milliseconds",
            ["provider", "status"],
            buckets=self._buckets_ms,
            registry=self._registry,
        )

    def observe_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
    ) -> None:
        self._http_requests_total.labels(method, path, str(status_code)).inc()
        self._http_request_duration_ms.labels(method, path).observe(duration_ms)

    def observe_provider_fetch(self, provider: str, success: bool, duration_ms: float) -> None:
        status = "success" if success else "error"
        self._provider_fetches_total.labels(provider, status).inc()
        self._provider_fetch_duration_ms.labels(provider, status).observe(duration_ms)

    def render_prometheus(self) -> str:
        from prometheus_client import generate_latest

        return generate_latest(self._registry).decode("utf-8")


_metrics_backend: MetricsBackend | None = None


def get_metrics_backend() -> MetricsBackend:
    """Return a cached metrics backend instance."""
    global _metrics_backend
    if _metrics_backend is None:
        settings = get_settings()
        _metrics_backend = _build_metrics_backend(settings.metrics_backend)
    return _metrics_backend


def _build_metrics_backend(backend: str) -> MetricsBackend:
    if backend == "prometheus":
        return PrometheusMetrics(DEFAULT_BUCKETS_MS)
    if backend != "inmemory":
        logger.warning(f"Unknown metrics backend {backend!r}, using in-memory metrics")
    return MetricsCollector(DEFAULT_BUCKETS_MS)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, then log and measure it."""

    def __init__(
        self,
        app: ASGIApp,
        metrics: MetricsBackend | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(app)
        self.metrics = metrics or get_metrics_backend()
        self.logger = logger or logging.getLogger("athlete_insights.request")

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_ctx.set(request_id)
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self._record(request, request_id, status_code, elapsed_ms)
            request_id_ctx.reset(token)

    def _record(
        self,
        request: Request,
        request_id: str,
        status_code: int,
        elapsed_ms: float,
    ) -> None:
        # Route templates, not raw paths, keep metric labels bounded
        route = getattr(request.scope.get("route"), "path", None)
        self.metrics.observe_request(request.method, route or UNMATCHED_ROUTE, status_code, elapsed_ms)
        self.logger.info(
            json.dumps(
                {
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "route": route,
                    "status": status_code,
                    "elapsed_ms": round(elapsed_ms, 2),
                }
            )
        )
