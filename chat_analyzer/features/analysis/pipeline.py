"""
Per-message fan-out over the active analyzers.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from chat_analyzer.components import Analyzer, PerformanceMonitor
from chat_analyzer.core.exceptions import AnalysisError
from chat_analyzer.core.logging import get_logger
from chat_analyzer.shared.schemas import MessageAnalysis
from chat_analyzer.shared.utils import Timer

logger = get_logger(__name__)


def new_analysis_id() -> str:
    return uuid.uuid4().hex


class MessagePipeline:
    """
    Runs every active analyzer on one message concurrently and merges the
    outputs into a ``MessageAnalysis``.

    All analyzers are awaited until they settle. If any failed, the first
    failure in declaration order is raised and no record is produced.
    """

    def __init__(
        self,
        analyzers: Sequence[Analyzer],
        monitor: Optional[PerformanceMonitor] = None,
        timeout: Optional[float] = None,
    ):
        keys = [analyzer.result_key for analyzer in analyzers]
        if len(keys) != len(set(keys)):
            raise ValueError(f"Duplicate analyzer result keys: {keys}")
        self.analyzers = list(analyzers)
        self.monitor = monitor
        self.timeout = timeout or None

    @property
    def result_keys(self) -> List[str]:
        return [analyzer.result_key for analyzer in self.analyzers]

    async def analyze_message(self, message: str, context: Optional[Dict[str, Any]] = None) -> MessageAnalysis:
        """
        Analyze one message with every active analyzer.

        Args:
            message: Message text
            context: Optional context passed unchanged to every analyzer

        Returns:
            Frozen analysis record with one ``results`` entry per analyzer

        Raises:
            AnalysisError: If any analyzer failed or timed out
        """
        context = dict(context or {})
        analysis_id = new_analysis_id()
        timestamp = datetime.now(timezone.utc)

        with Timer("message_analysis") as timer:
            outcomes = await asyncio.gather(
                *(self._run(analyzer, message, context) for analyzer in self.analyzers),
                return_exceptions=True,
            )
        processing_time = timer.duration_ms

        results: Dict[str, Dict[str, Any]] = {}
        failures: List[AnalysisError] = []
        for analyzer, outcome in zip(self.analyzers, outcomes):
            if isinstance(outcome, BaseException):
                failures.append(self._as_analysis_error(analyzer, outcome))
            else:
                results[analyzer.result_key] = outcome

        if failures:
            error = failures[0]
            error.related = failures[1:]
            logger.error(
                f"Message analysis failed in {len(failures)} analyzer(s)",
                extra={"analysis_id": analysis_id, "analyzers": [f.analyzer for f in failures]}
            )
            raise error

        if self.monitor is not None:
            self.monitor.record("analyze_message", processing_time)

        logger.info(
            f"Message analyzed in {processing_time:.1f}ms",
            extra={"analysis_id": analysis_id, "processing_time": processing_time}
        )
        return MessageAnalysis(
            id=analysis_id,
            message=message,
            context=context,
            timestamp=timestamp,
            results=results,
            processing_time=processing_time,
        )

    async def _run(self, analyzer: Analyzer, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        if self.timeout is None:
            return await analyzer.analyze(message, context)
        try:
            return await asyncio.wait_for(analyzer.analyze(message, context), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise AnalysisError(
                analyzer.name,
                e,
                message=f"Analyzer '{analyzer.name}' timed out after {self.timeout}s",
            ) from e

    @staticmethod
    def _as_analysis_error(analyzer: Analyzer, exc: BaseException) -> AnalysisError:
        if isinstance(exc, AnalysisError):
            return exc
        return AnalysisError(analyzer.name, exc)
