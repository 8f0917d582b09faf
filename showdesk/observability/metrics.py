"""
Prometheus metrics for the show catalogue service.
"""

from prometheus_client import Counter, Histogram


# ── CSV Import ───────────────────────────────────────────────
import_files_total = Counter(
    "import_files_total",
    "CSV files received for import, by outcome",
    ["outcome"],
)

import_rows_parsed_total = Counter(
    "import_rows_parsed_total",
    "CSV data rows read from import files",
)

import_validation_errors_total = Counter(
    "import_validation_errors_total",
    "Row-level validation errors raised during import",
)

import_commit_rows_total = Counter(
    "import_commit_rows_total",
    "Rows committed through bulk import, by result",
    ["result"],
)

# ── Duplicate Checks ─────────────────────────────────────────
duplicate_checks_total = Counter(
    "duplicate_checks_total",
    "Duplicate-title checks issued to the backend",
    ["mode", "outcome"],
)

# ── Backend API ──────────────────────────────────────────────
backend_request_latency_seconds = Histogram(
    "backend_request_latency_seconds",
    "Latency of backend API calls",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30],
)

backend_request_failures_total = Counter(
    "backend_request_failures_total",
    "Backend API calls that failed",
    ["operation", "status_code"],
)
