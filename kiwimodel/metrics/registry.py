from prometheus_client import Counter, Histogram

KIWI_QUERY_TOTAL = Counter(
    "kiwi_query_total",
    "Statements executed against the database",
    ["table", "op_type", "status"],
)

KIWI_QUERY_LATENCY_SECONDS = Histogram(
    "kiwi_query_latency_seconds",
    "Statement execution latency in seconds",
    ["table", "op_type"],
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)
