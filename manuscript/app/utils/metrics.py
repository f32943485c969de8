"""Prometheus metrics for LLM provider calls."""

from prometheus_client import Counter, Histogram

provider_latency_ms = Histogram(
    "provider_latency_ms",
    "LLM provider call latency in milliseconds",
    ["provider", "outcome"],
    buckets=[100, 250, 500, 1000, 2000, 4000, 8000, 16000, 32000, 64000],
)

provider_errors_total = Counter(
    "provider_errors_total",
    "Total failed LLM provider calls",
    ["provider", "outcome"],
)

provider_fallbacks_total = Counter(
    "provider_fallbacks_total",
    "Total requests retried against the fallback provider",
    ["provider", "fallback"],
)


class PrometheusProviderMetrics:
    """Prometheus-based provider metrics implementation."""

    def record_latency(self, provider: str, outcome: str, latency_ms: float) -> None:
        """Record provider call latency."""
        provider_latency_ms.labels(provider=provider, outcome=outcome).observe(latency_ms)

    def inc_error(self, provider: str, outcome: str) -> None:
        """Increment error counter."""
        provider_errors_total.labels(provider=provider, outcome=outcome).inc()

    def inc_fallback(self, provider: str, fallback: str) -> None:
        """Increment fallback counter."""
        provider_fallbacks_total.labels(provider=provider, fallback=fallback).inc()
