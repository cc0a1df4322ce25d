"""Prometheus metrics definitions for the referral assistant."""

from prometheus_client import Counter, Histogram

# --- HTTP Metrics ---

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# --- Masking Metrics ---

MASK_REQUESTS_TOTAL = Counter(
    "mask_requests_total",
    "Total non-empty texts passed through the masking pipeline",
)

REDACTIONS_TOTAL = Counter(
    "redactions_total",
    "Total PII spans replaced with a marker",
    ["category"],
)

TERM_LIST_LOADS_TOTAL = Counter(
    "term_list_loads_total",
    "Clinical term list load attempts",
    ["outcome"],  # outcome: loaded/failed/disabled
)

# --- LLM Metrics ---

LLM_REQUESTS_TOTAL = Counter(
    "llm_requests_total",
    "Total LLM API requests",
    ["model", "purpose", "status"],
)

LLM_TOKENS_TOTAL = Counter(
    "llm_tokens_total",
    "Total LLM tokens consumed",
    ["model", "purpose", "type"],  # type: input/output
)

LLM_REQUEST_DURATION_SECONDS = Histogram(
    "llm_request_duration_seconds",
    "LLM request duration in seconds",
    ["model", "purpose"],
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)
