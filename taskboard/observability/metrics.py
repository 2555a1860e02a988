"""
Prometheus metric definitions

All metrics live here; middleware and business code import what they need.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── Request metrics ──

REQUEST_TOTAL = Counter(
    "taskboard_request_total",
    "HTTP requests",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "taskboard_request_duration_ms",
    "HTTP request duration (ms)",
    ["method", "endpoint"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)

# ── Task metrics ──

TASK_OPERATION_TOTAL = Counter(
    "taskboard_task_operation_total",
    "Task operations by outcome",
    ["operation", "outcome"],  # outcome: created/conflict/invalid/finished/no_open/...
)

# ── Stream metrics ──

STREAM_SUBSCRIBERS = Gauge(
    "taskboard_stream_subscribers",
    "Open task stream connections",
)

SNAPSHOT_PUSH_TOTAL = Counter(
    "taskboard_snapshot_push_total",
    "Task list snapshots pushed to stream subscribers",
)
