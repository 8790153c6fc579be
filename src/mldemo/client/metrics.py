from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


class MetricsManager:
    """
    Prometheus metrics recorded by the prediction client.

    Attributes
    ----------
    registry : CollectorRegistry
        Registry holding the metrics below. A fresh one is created when none
        is given, which keeps tests isolated.
    predictions : Counter
        Completed prediction calls, labeled by domain and outcome ("ok" or
        the name of the raised error class).
    latency : Histogram
        Round-trip latency of prediction calls in seconds, by domain.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry: CollectorRegistry = registry or CollectorRegistry()

        self.predictions: Counter = Counter(
            "client_predictions_total",
            "Prediction calls by outcome",
            ["domain", "outcome"],
            registry=self.registry,
        )

        self.latency: Histogram = Histogram(
            "client_prediction_seconds",
            "Prediction round-trip latency",
            ["domain"],
            buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30),
            registry=self.registry,
        )

    def render(self) -> bytes:
        """Render all metrics in Prometheus' text exposition format."""
        return generate_latest(self.registry)

