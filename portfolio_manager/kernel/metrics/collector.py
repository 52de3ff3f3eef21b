"""
Prometheus counters for the portfolio core.

One MetricsCollector owns one CollectorRegistry. The application builds a
single long-lived collector and hands it to every Container; tests build
a fresh one per case so counts never leak between them.
"""

from typing import Optional, Protocol

from prometheus_client import CollectorRegistry, Counter, generate_latest

from portfolio_manager.config import get_settings


class MetricsRecorder(Protocol):
    """Counter sink for committed operations."""

    def increment_created(self, entity: str) -> None: ...

    def increment_updated(self, entity: str) -> None: ...

    def increment_deleted(self, entity: str) -> None: ...

    def increment_access_denied(self, entity: str) -> None: ...

    def increment_bulk_reorder(self, entity: str) -> None: ...


class MetricsCollector:
    """MetricsRecorder backed by prometheus_client counters."""

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        namespace: Optional[str] = None,
    ):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.namespace = namespace = namespace or get_settings().metrics_namespace

        self.entities_created = Counter(
            "entities_created_total",
            "Resources created",
            ["entity"],
            namespace=namespace,
            registry=self.registry,
        )
        self.entities_updated = Counter(
            "entities_updated_total",
            "Resources updated, including position changes",
            ["entity"],
            namespace=namespace,
            registry=self.registry,
        )
        self.entities_deleted = Counter(
            "entities_deleted_total",
            "Resources deleted",
            ["entity"],
            namespace=namespace,
            registry=self.registry,
        )
        self.access_denied = Counter(
            "access_denied_total",
            "Authorization checks that failed",
            ["entity"],
            namespace=namespace,
            registry=self.registry,
        )
        self.bulk_reorders = Counter(
            "bulk_reorders_total",
            "Bulk reorder batches applied",
            ["entity"],
            namespace=namespace,
            registry=self.registry,
        )

    def increment_created(self, entity: str) -> None:
        self.entities_created.labels(entity=entity).inc()

    def increment_updated(self, entity: str) -> None:
        self.entities_updated.labels(entity=entity).inc()

    def increment_deleted(self, entity: str) -> None:
        self.entities_deleted.labels(entity=entity).inc()

    def increment_access_denied(self, entity: str) -> None:
        self.access_denied.labels(entity=entity).inc()

    def increment_bulk_reorder(self, entity: str) -> None:
        self.bulk_reorders.labels(entity=entity).inc()

    def sample(self, metric: str, entity: str) -> float:
        """Current value of one labelled counter, e.g. sample("entities_created_total", "section")."""
        value = self.registry.get_sample_value(f"{self.namespace}_{metric}", {"entity": entity})
        return value or 0.0

    def render(self) -> bytes:
        """Text exposition of every counter in this registry."""
        return generate_latest(self.registry)
