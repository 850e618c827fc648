"""
Chat analysis service: lifecycle controller over the component registry, the
message pipeline and the conversation aggregator.
"""

import threading
import time
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from chat_analyzer.components import Analyzer, Component, PerformanceMonitor
from chat_analyzer.core import events
from chat_analyzer.core.config import AnalyzerConfig, Settings, get_settings
from chat_analyzer.core.events import EventBus, EventHandler
from chat_analyzer.core.exceptions import (
    AggregateShutdownError,
    LifecycleError,
    NotInitializedError,
)
from chat_analyzer.core.logging import get_logger
from chat_analyzer.features.analysis.aggregator import ConversationAggregator
from chat_analyzer.features.analysis.pipeline import MessagePipeline
from chat_analyzer.features.analysis.registry import ComponentKind, ComponentRegistry
from chat_analyzer.shared.schemas import ConversationAnalysis, MessageAnalysis, SystemStatus

logger = get_logger(__name__)


class LifecycleState(str, Enum):
    CREATED = "created"
    READY = "ready"
    FAILED = "failed"
    SHUT_DOWN = "shut_down"


class ChatAnalyzer:
    """
    Entry point for message and conversation analysis.

    Usage::

        async with ChatAnalyzer({"responses": {"enabled": True}}) as analyzer:
            analysis = await analyzer.analyze_message("Hello, can you help me?")

    Lifecycle: ``created`` -> ``ready`` (or permanently ``failed``) ->
    ``shut_down``. Analysis calls outside ``ready`` raise ``NotInitializedError``.
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        settings: Optional[Settings] = None,
        registry: Optional[ComponentRegistry] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or ComponentRegistry(settings=self.settings)
        self.config = AnalyzerConfig.from_user(config)
        self.events = EventBus()

        self.state = LifecycleState.CREATED
        self.start_time = time.monotonic()
        self._analysis_count = 0
        self._count_lock = threading.Lock()

        self.components: List[Component] = []
        self.pipeline: Optional[MessagePipeline] = None
        self.aggregator: Optional[ConversationAggregator] = None

    async def __aenter__(self) -> "ChatAnalyzer":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.shutdown()

    @property
    def is_initialized(self) -> bool:
        return self.state is LifecycleState.READY

    @property
    def analysis_count(self) -> int:
        return self._analysis_count

    @property
    def monitor(self) -> Optional[PerformanceMonitor]:
        return next((c for c in self.components if isinstance(c, PerformanceMonitor)), None)

    def subscribe(self, event: str, handler: EventHandler) -> None:
        self.events.subscribe(event, handler)

    def unsubscribe(self, event: str, handler: EventHandler) -> bool:
        return self.events.unsubscribe(event, handler)

    async def initialize(self, config: Optional[Mapping[str, Any]] = None) -> None:
        """
        Build and initialize the active component set.

        Args:
            config: Replaces the constructor configuration when given

        Raises:
            ConfigurationError: If ``config`` is invalid
            InitializationError: If any component failed; the analyzer is then permanently failed
            LifecycleError: If the analyzer already failed or was shut down
        """
        if self.state is LifecycleState.READY:
            return
        if self.state is not LifecycleState.CREATED:
            raise LifecycleError(
                f"Cannot initialize a chat analyzer in state '{self.state.value}'",
                error_code="INVALID_LIFECYCLE_TRANSITION"
            )

        logger.info("Initializing Chat Analyzer components")
        try:
            if config is not None:
                self.config = AnalyzerConfig.from_user(config)
            self.components = await self.registry.build_active_set(self.config)
        except Exception as e:
            self.state = LifecycleState.FAILED
            logger.error(f"Chat Analyzer initialization error: {e}")
            await self.events.emit(events.ERROR, self._error_payload(e, stage="initialize"))
            raise

        monitor = self.monitor
        analyzers = [c for c in self.components if isinstance(c, Analyzer)]
        self.pipeline = MessagePipeline(analyzers, monitor=monitor, timeout=self._analyzer_timeout())
        self.aggregator = ConversationAggregator(self.analyze_message, monitor=monitor)
        self.state = LifecycleState.READY

        await self.events.emit(events.INITIALIZED, {"components": [c.name for c in self.components]})
        logger.info(
            "Chat Analyzer initialized successfully",
            extra={"components": [c.name for c in self.components]}
        )

    async def analyze_message(self, message: str, context: Optional[Dict[str, Any]] = None) -> MessageAnalysis:
        """
        Analyze a single message with every active analyzer.

        Raises:
            NotInitializedError: Outside the ready window
            AnalysisError: If any analyzer failed
        """
        self._ensure_ready()
        try:
            analysis = await self.pipeline.analyze_message(message, context)
        except Exception as e:
            logger.error(f"Message analysis error: {e}")
            await self.events.emit(events.ERROR, self._error_payload(e, stage="analyze_message"))
            raise

        with self._count_lock:
            self._analysis_count += 1
        # subscribers get a copy; the aggregator summarizes the original
        await self.events.emit(events.MESSAGE_ANALYZED, {"analysis": analysis.model_copy(deep=True)})
        return analysis

    async def analyze_conversation(
        self,
        conversation: Sequence[str],
        context: Optional[Dict[str, Any]] = None,
    ) -> ConversationAnalysis:
        """
        Analyze every message of a conversation in order and summarize them.

        A failing message aborts the whole conversation.

        Raises:
            NotInitializedError: Outside the ready window
            AnalysisError: If any message failed
        """
        self._ensure_ready()
        try:
            analysis = await self.aggregator.aggregate(conversation, context)
        except Exception as e:
            logger.error(f"Conversation analysis error: {e}")
            await self.events.emit(events.ERROR, self._error_payload(e, stage="analyze_conversation"))
            raise

        await self.events.emit(events.CONVERSATION_ANALYZED, {"analysis": analysis.model_copy(deep=True)})
        return analysis

    def get_system_status(self) -> SystemStatus:
        present = {c.name for c in self.components}
        return SystemStatus(
            initialized=self.is_initialized,
            state=self.state.value,
            analysis_count=self._analysis_count,
            uptime=time.monotonic() - self.start_time,
            components={kind.value: kind.value in present for kind in ComponentKind},
        )

    def get_supported_features(self) -> Dict[str, bool]:
        return self.registry.supported_features(self.config)

    def get_performance_metrics(self) -> Dict[str, Dict[str, float]]:
        monitor = self.monitor
        return monitor.get_metrics() if monitor is not None else {}

    async def shutdown(self) -> None:
        """
        Shut down every component once, in reverse start order.

        Safe to call repeatedly and before ``initialize``. Component failures
        do not stop the teardown of the others.

        Raises:
            AggregateShutdownError: After teardown, if any component failed to shut down
        """
        if self.state is LifecycleState.SHUT_DOWN:
            return

        logger.info("Shutting down Chat Analyzer")
        components, self.components = self.components, []
        self.state = LifecycleState.SHUT_DOWN
        self.pipeline = None
        self.aggregator = None

        failures: Dict[str, BaseException] = {}
        for component in reversed(components):
            try:
                await component.shutdown()
            except Exception as e:
                logger.error(f"Error shutting down component {component.name}: {e}")
                failures[component.name] = e

        await self.events.emit(events.SHUTDOWN, {"failures": list(failures)})
        logger.info("Chat Analyzer shutdown complete")

        if failures:
            raise AggregateShutdownError(failures)

    def _ensure_ready(self) -> None:
        if self.state is not LifecycleState.READY:
            raise NotInitializedError(
                "Chat Analyzer not initialized",
                error_code="NOT_INITIALIZED",
                details={"state": self.state.value}
            )

    def _analyzer_timeout(self) -> Optional[float]:
        timeout = self.config.performance.analyzer_timeout
        if timeout is None:
            timeout = self.settings.ANALYZER_TIMEOUT
        return timeout or None

    @staticmethod
    def _error_payload(exc: BaseException, stage: str) -> Dict[str, Any]:
        return {"error": str(exc), "error_type": type(exc).__name__, "stage": stage}
