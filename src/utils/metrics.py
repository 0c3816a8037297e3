"""Prometheus metrics for the welding knowledge API.

All metric objects are defined at import time and registered on the default
registry exposed under /metrics.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

welding_recommendations_total = Counter(
    "welding_recommendations_total",
    "Number of technique recommendations served",
    ["electrode", "position"],
)
welding_recommendation_duration_seconds = Histogram(
    "welding_recommendation_duration_seconds",
    "Recommendation derivation latency",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05],
)
welding_lookup_misses_total = Counter(
    "welding_lookup_misses_total",
    "Knowledge-table lookups for keys outside the known set",
    ["table"],
)


def metric_label(value: object, known: bool) -> str:
    """Label value bounded to known keys so arbitrary input cannot add series."""
    if not known or value is None:
        return "unknown"
    return str(getattr(value, "value", value))
