"""Prometheus metrics for the RFQ pipeline and its external calls."""

from prometheus_client import Counter, Histogram

# Pipeline metrics
pipeline_runs_total = Counter(
    "rfq_pipeline_runs_total",
    "Total RFQ pipeline runs",
    ["outcome"],
)

pipeline_step_latency_ms = Histogram(
    "rfq_pipeline_step_latency_ms",
    "RFQ pipeline step latency in milliseconds",
    ["step", "outcome"],
    buckets=[10, 50, 100, 500, 1000, 5000, 15000, 30000, 60000, 120000],
)

# External call metrics
llm_calls_total = Counter(
    "llm_calls_total",
    "Total text-generation calls",
    ["purpose", "outcome"],
)

store_operations_total = Counter(
    "store_operations_total",
    "Total SharePoint store operations",
    ["operation", "outcome"],
)


class PrometheusPipelineMetrics:
    """Prometheus-based pipeline metrics implementation."""

    def record_step(self, step: str, outcome: str, latency_ms: float) -> None:
        """Record pipeline step latency."""
        pipeline_step_latency_ms.labels(step=step, outcome=outcome).observe(latency_ms)

    def inc_run(self, outcome: str) -> None:
        """Increment pipeline run counter."""
        pipeline_runs_total.labels(outcome=outcome).inc()

    def inc_llm_call(self, purpose: str, outcome: str) -> None:
        """Increment text-generation call counter."""
        llm_calls_total.labels(purpose=purpose, outcome=outcome).inc()

    def inc_store_operation(self, operation: str, outcome: str) -> None:
        """Increment store operation counter."""
        store_operations_total.labels(operation=operation, outcome=outcome).inc()


metrics = PrometheusPipelineMetrics()
