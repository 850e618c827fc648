"""
Operation timing collection.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, DefaultDict, Dict, List, Optional

from chat_analyzer.components.base import Component
from chat_analyzer.core.config import PerformanceConfig

MAX_ALERTS = 100


class PerformanceMonitor(Component):
    """
    Records how long pipeline operations take.

    Not a message analyzer: it never contributes to ``results``. The pipeline
    and the aggregator report durations through ``record``.
    """

    name = "performance"

    def __init__(self, config: Optional[PerformanceConfig] = None):
        super().__init__(config or PerformanceConfig())
        self._stats: DefaultDict[str, Dict[str, float]] = defaultdict(
            lambda: {"count": 0, "total_ms": 0.0, "max_ms": 0.0}
        )
        self.alerts: List[Dict[str, Any]] = []

    async def teardown(self) -> None:
        self.logger.info("Performance summary", extra={"metrics": self.get_metrics()})

    def record(self, operation: str, duration_ms: float) -> Dict[str, Any]:
        """
        Record one operation duration.

        Returns:
            The recorded metric, with ``slow`` set when it crossed the alert threshold
        """
        metric = {
            "operation": operation,
            "duration": duration_ms,
            "timestamp": datetime.now(timezone.utc),
            "slow": False,
        }
        if not self.config.monitoring:
            return metric

        stats = self._stats[operation]
        stats["count"] += 1
        stats["total_ms"] += duration_ms
        stats["max_ms"] = max(stats["max_ms"], duration_ms)

        if self.config.alerts and duration_ms > self.config.slow_threshold_ms:
            metric["slow"] = True
            self.alerts.append(metric)
            del self.alerts[:-MAX_ALERTS]
            self.logger.warning(
                f"Slow operation: {operation} took {duration_ms:.1f} ms",
                extra={"operation": operation, "threshold_ms": self.config.slow_threshold_ms}
            )
        return metric

    def get_metrics(self) -> Dict[str, Dict[str, float]]:
        return {
            operation: {
                "count": stats["count"],
                "total_ms": stats["total_ms"],
                "max_ms": stats["max_ms"],
                "average_ms": stats["total_ms"] / stats["count"] if stats["count"] else 0.0,
            }
            for operation, stats in self._stats.items()
        }
