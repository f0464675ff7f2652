"""Prometheus metrics for reconstruction outcomes, projections and collaborator health"""

from prometheus_client import Counter, Histogram, Gauge

from finly_balance.domain.models import ProjectionResult

# Reconstruction metrics
reconstruction_counter = Counter(
    "finly_reconstruction_total",
    "Balance history reconstructions",
    ["outcome"],  # ready | failed
)

reconstruction_duration_histogram = Histogram(
    "finly_reconstruction_duration_seconds",
    "End-to-end reconstruction pipeline time",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

projected_balance_gauge = Gauge(
    "finly_projected_end_of_period_balance",
    "Most recent projected end-of-period balance",
)

# Collaborator metrics
source_failures_counter = Counter(
    "finly_source_failures_total",
    "Failed balance or transaction fetches",
)

insight_outcome_counter = Counter(
    "finly_insight_requests_total",
    "Insight builder requests by outcome",
    ["status"],  # fulfilled | degraded
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_reconstruction(
    outcome: str,
    duration_seconds: float,
    projection: ProjectionResult | None = None,
    insight_status: str | None = None,
) -> None:
    """Record one finished pipeline run"""
    reconstruction_counter.labels(outcome=outcome).inc()
    reconstruction_duration_histogram.observe(duration_seconds)

    if projection is not None:
        projected_balance_gauge.set(float(projection.end_of_period))

    if insight_status is not None:
        insight_outcome_counter.labels(status=insight_status).inc()
