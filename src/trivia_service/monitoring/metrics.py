"""Custom Prometheus metrics for the trivia service.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- generation_outcomes_total{outcome="failed"} (users seeing 500s)
- generation_outcomes_total{outcome="fallback"} (models drifting off the length contract)
- model_attempts_total{outcome="not_found"} (retired model names in MODEL_CONFIGS)
"""

from prometheus_client import Counter, Histogram

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Provider generation latency in seconds",
    ["model", "success"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0],
)
"""
Provider call latency histogram.

Labels:
- model: Model configuration name (e.g., gemini-2.0-flash)
- success: true (2xx response), false (error, timeout or 404)

Buckets stop at the 20s per-call timeout.
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
"""
Token consumption counter.

Labels:
- model: Model configuration name
- token_type: prompt, output

Used for cost estimation.
"""

# === Orchestration Metrics ===

model_attempts_total = Counter(
    "model_attempts_total",
    "Model configuration attempts by outcome",
    ["model", "outcome"],
)
"""
One increment per model configuration tried for a request.

Labels:
- model: Model configuration name
- outcome: accepted, not_found, empty, truncated, out_of_range, error
"""

correction_attempts_total = Counter(
    "correction_attempts_total",
    "Length-correction turns sent to the provider",
    ["model"],
)

generation_outcomes_total = Counter(
    "generation_outcomes_total",
    "Final generation outcomes",
    ["outcome"],
)
"""
Labels:
- outcome: accepted (in-range answer), fallback (best-effort answer), failed

Alert thresholds:
- WARN: fallback rate > 10% of requests
- CRITICAL: failed rate > 5% of requests
"""

# === Admission & Analytics Metrics ===

rate_limited_total = Counter(
    "rate_limited_total",
    "Requests rejected by the per-address rate limiter",
)

keyword_log_failures_total = Counter(
    "keyword_log_failures_total",
    "Keyword analytics writes that failed (swallowed)",
    ["dispatch"],
)
