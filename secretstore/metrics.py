"""
Prometheus metrics for the secret store.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry


class Metrics:
    """
    Centralized metrics for the secret store service.

    Each instance owns its registry so isolated service contexts do not
    collide on metric names.
    """

    def __init__(self, service_name: str = "secretstore", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            registry=self.registry,
        )

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Secret store specific
        self.secret_operations_total = Counter(
            "secretstore_operations_total",
            "Secret operations by outcome",
            ["operation", "outcome"],
            registry=self.registry,
        )

        self.secrets_purged_total = Counter(
            "secretstore_secrets_purged_total",
            "Secrets deleted by the expiry sweeper",
            registry=self.registry,
        )

        self.sweep_failures_total = Counter(
            "secretstore_sweep_failures_total",
            "Records the expiry sweeper could not decode or delete",
            registry=self.registry,
        )

        self.sweep_duration = Histogram(
            "secretstore_sweep_duration_seconds",
            "Expiry sweep duration in seconds",
            registry=self.registry,
        )

    def record_operation(self, operation: str, outcome: str):
        """Record the outcome of a caller-facing secret operation."""
        self.secret_operations_total.labels(operation=operation, outcome=outcome).inc()

    def record_sweep(self, purged: int, failures: int, duration: float):
        """Record the result of one expiry sweep."""
        self.secrets_purged_total.inc(purged)
        self.sweep_failures_total.inc(failures)
        self.sweep_duration.observe(duration)
