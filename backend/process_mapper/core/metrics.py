"""Prometheus metric definitions for the process mapper backend."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, Info

# ── Application info ────────────────────────────────────────────────
app_info = Info("processmapper", "Process mapper application metadata")

# ── HTTP request metrics ────────────────────────────────────────────
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method"],
)

# ── Database connection pool ────────────────────────────────────────
db_pool_size = Gauge("db_pool_size", "Current number of connections in the pool")
db_pool_checked_in = Gauge("db_pool_checked_in", "Connections currently idle in the pool")
db_pool_checked_out = Gauge("db_pool_checked_out", "Connections currently in use")
db_pool_overflow = Gauge("db_pool_overflow", "Current overflow connections beyond pool_size")

# ── Process map generation ──────────────────────────────────────────
process_map_generations_total = Counter(
    "process_map_generations_total",
    "Process maps generated, by the source that produced them",
    ["source"],
)

generator_fallbacks_total = Counter(
    "generator_fallbacks_total",
    "Generator calls that fell back to the deterministic pipeline",
    ["reason"],
)

generator_call_duration_seconds = Histogram(
    "generator_call_duration_seconds",
    "Duration of generative augmentation calls in seconds",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0),
)

# ── Sessions ────────────────────────────────────────────────────────
mapping_sessions_active = Gauge(
    "mapping_sessions_active",
    "Mapping sessions currently held in the session store",
)

report_snapshots_total = Counter(
    "report_snapshots_total",
    "Process map report snapshots persisted",
)
