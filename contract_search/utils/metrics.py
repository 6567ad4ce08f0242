"""Prometheus metrics for ingestion and search."""

from prometheus_client import Counter, Histogram

# Search metrics
search_stage_latency_ms = Histogram(
    "search_stage_latency_ms",
    "Search stage latency in milliseconds",
    ["stage", "outcome"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)

search_stage_errors_total = Counter(
    "search_stage_errors_total",
    "Total search stages degraded by store errors",
    ["stage"],
)

search_orphan_chunks_total = Counter(
    "search_orphan_chunks_total",
    "Total matched chunks dropped because their document could not be resolved",
)

# Ingestion metrics
ingest_files_total = Counter(
    "ingest_files_total",
    "Total ingested files by outcome",
    ["outcome"],
)

ingest_chunks_total = Counter(
    "ingest_chunks_total",
    "Total chunks persisted during ingestion",
)


class PrometheusSearchMetrics:
    """Prometheus-based search and ingestion metrics implementation."""

    def record_stage(self, stage: str, outcome: str, latency_ms: float) -> None:
        """Record search stage latency."""
        search_stage_latency_ms.labels(stage=stage, outcome=outcome).observe(latency_ms)

    def inc_stage_error(self, stage: str) -> None:
        """Increment stage error counter."""
        search_stage_errors_total.labels(stage=stage).inc()

    def inc_orphan_chunks(self, count: int) -> None:
        """Increment orphaned chunk counter."""
        search_orphan_chunks_total.inc(count)

    def inc_ingest(self, outcome: str, chunks: int = 0) -> None:
        """Record one ingested file and the chunks it produced."""
        ingest_files_total.labels(outcome=outcome).inc()
        if chunks:
            ingest_chunks_total.inc(chunks)
