from __future__ import annotations

from ..metrics.registry import KIWI_QUERY_LATENCY_SECONDS, KIWI_QUERY_TOTAL


def observe_query(table: str, op_type: str, status: str, latency_s: float) -> None:
    """Record one executed statement."""
    KIWI_QUERY_TOTAL.labels(table=table, op_type=op_type, status=status).inc()
    KIWI_QUERY_LATENCY_SECONDS.labels(table=table, op_type=op_type).observe(latency_s)
