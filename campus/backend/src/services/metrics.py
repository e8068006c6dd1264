"""Prometheus metric definitions for record imports."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

import_records_total = Counter(
    "campus_import_records_total",
    "Records attempted by the bulk importer, by kind and outcome.",
    labelnames=["kind", "outcome"],
)

import_duration_seconds = Histogram(
    "campus_import_duration_seconds",
    "Wall time of one bulk import run in seconds.",
)

__all__ = [
    "import_duration_seconds",
    "import_records_total",
]
