"""
File: instrumentation.py
Purpose: Prometheus metrics collectors used across the config API.

Exports:
  - REQUESTS(route, method, status): HTTP requests per path
  - LATENCY(route): request latency histogram
  - CONFIG_FALLBACKS(key, reason): structured config inputs that could not be used
  - RATE_LIMITED: requests rejected by the fixed-window limiter
  - AUTH_FAILURES(reason): API key / admin key rejections
  - FLAG_UPDATES: successful admin feature-flag merges
"""

from fastapi import FastAPI
from prometheus_client import Counter, Histogram, CollectorRegistry, CONTENT_TYPE_LATEST, generate_latest

REGISTRY = CollectorRegistry(auto_describe=True)

REQUESTS = Counter(
    "config_api_requests_total",
    "Total API requests",
    labelnames=["route", "method", "status"],
    registry=REGISTRY,
)

LATENCY = Histogram(
    "config_api_latency_seconds",
    "API latency in seconds",
    labelnames=["route"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2),
    registry=REGISTRY,
)

CONFIG_FALLBACKS = Counter(
    "config_source_fallbacks_total",
    "Structured configuration inputs that failed to parse",
    labelnames=["key", "reason"],  # reason: invalid_json | invalid_shape
    registry=REGISTRY,
)

RATE_LIMITED = Counter(
    "rate_limited_total",
    "Requests rejected by the rate limiter",
    registry=REGISTRY,
)

AUTH_FAILURES = Counter(
    "auth_failures_total",
    "Rejected API or admin keys",
    labelnames=["reason"],  # missing_key | invalid_key | bad_admin_key
    registry=REGISTRY,
)

FLAG_UPDATES = Counter(
    "feature_flag_updates_total",
    "Successful admin feature-flag updates",
    registry=REGISTRY,
)

def setup_metrics(app: FastAPI) -> None:
    """Attach registry to app.state for the /metrics endpoint to read."""
    app.state.prom_registry = REGISTRY

def render_metrics():
    """Return (content_type, payload) for a Starlette/FastAPI Response."""
    return CONTENT_TYPE_LATEST, generate_latest(REGISTRY)
