"""Monitoring and metrics instrumentation for the trivia service.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from trivia_service.monitoring.metrics import (
    correction_attempts_total,
    generation_outcomes_total,
    keyword_log_failures_total,
    llm_latency_seconds,
    llm_tokens_total,
    model_attempts_total,
    rate_limited_total,
)

__all__ = [
    "llm_latency_seconds",
    "llm_tokens_total",
    "model_attempts_total",
    "correction_attempts_total",
    "generation_outcomes_total",
    "rate_limited_total",
    "keyword_log_failures_total",
]
