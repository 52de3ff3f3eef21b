"""
Operational counters.
"""

from portfolio_manager.kernel.metrics.collector import MetricsCollector, MetricsRecorder

__all__ = ["MetricsCollector", "MetricsRecorder"]
