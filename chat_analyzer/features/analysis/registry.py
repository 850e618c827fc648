"""
Component registry: which component kinds exist, when each is active, and how
the active set is built and initialized.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from chat_analyzer.components import (
    Component,
    ConversationAnalyzer,
    IntentDetector,
    OpenAIAnalyzer,
    PerformanceMonitor,
    QualityScorer,
    RealTimeAnalyzer,
    ResponseGenerator,
    SentimentAnalyzer,
)
from chat_analyzer.core.config import AnalyzerConfig, Settings, get_settings
from chat_analyzer.core.exceptions import InitializationError
from chat_analyzer.core.logging import get_logger

logger = get_logger(__name__)


class ComponentKind(str, Enum):
    """Every component the pipeline knows about, in declaration order."""

    SENTIMENT = "sentiment"
    INTENT = "intent"
    QUALITY = "quality"
    RESPONSES = "responses"
    CONVERSATION = "conversation"
    OPENAI = "openai"
    REALTIME = "realtime"
    PERFORMANCE = "performance"


ComponentFactory = Callable[[AnalyzerConfig, Settings], Component]
ActivationRule = Callable[[AnalyzerConfig, Settings], bool]


@dataclass(frozen=True)
class ComponentSpec:
    kind: ComponentKind
    factory: ComponentFactory
    is_active: ActivationRule


def openai_credential(config: AnalyzerConfig, settings: Settings) -> Optional[str]:
    return config.openai.api_key or settings.OPENAI_API_KEY


def _build_openai(config: AnalyzerConfig, settings: Settings) -> Component:
    section = config.openai.model_copy(update={"api_key": openai_credential(config, settings)})
    return OpenAIAnalyzer(section)


COMPONENT_SPECS: Sequence[ComponentSpec] = (
    ComponentSpec(
        ComponentKind.SENTIMENT,
        lambda config, settings: SentimentAnalyzer(config.sentiment),
        lambda config, settings: config.sentiment.enabled,
    ),
    ComponentSpec(
        ComponentKind.INTENT,
        lambda config, settings: IntentDetector(config.intent),
        lambda config, settings: config.intent.enabled,
    ),
    ComponentSpec(
        ComponentKind.QUALITY,
        lambda config, settings: QualityScorer(config.quality),
        lambda config, settings: config.quality.enabled,
    ),
    ComponentSpec(
        ComponentKind.RESPONSES,
        lambda config, settings: ResponseGenerator(config.responses),
        lambda config, settings: config.responses.enabled,
    ),
    ComponentSpec(
        ComponentKind.CONVERSATION,
        lambda config, settings: ConversationAnalyzer(),
        lambda config, settings: True,
    ),
    ComponentSpec(
        ComponentKind.OPENAI,
        _build_openai,
        lambda config, settings: config.openai.enabled and bool(openai_credential(config, settings)),
    ),
    ComponentSpec(
        ComponentKind.REALTIME,
        lambda config, settings: RealTimeAnalyzer(config.optimization),
        lambda config, settings: config.optimization.real_time,
    ),
    ComponentSpec(
        ComponentKind.PERFORMANCE,
        lambda config, settings: PerformanceMonitor(config.performance),
        lambda config, settings: config.performance.enabled,
    ),
)


class ComponentRegistry:
    """
    Builds the active component set from an effective configuration.

    ``overrides`` swaps the factory of a kind (e.g. a fake analyzer in tests)
    without changing when that kind is active.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        overrides: Optional[Mapping[ComponentKind, ComponentFactory]] = None,
        specs: Sequence[ComponentSpec] = COMPONENT_SPECS,
    ):
        self.settings = settings or get_settings()
        self.specs = tuple(specs)
        self.overrides: Dict[ComponentKind, ComponentFactory] = dict(overrides or {})

    def active_kinds(self, config: AnalyzerConfig) -> List[ComponentKind]:
        return [spec.kind for spec in self.specs if spec.is_active(config, self.settings)]

    def supported_features(self, config: AnalyzerConfig) -> Dict[str, bool]:
        return {
            "sentiment": config.sentiment.enabled,
            "intent": config.intent.enabled,
            "responses": config.responses.enabled,
            "quality": config.quality.enabled,
            "optimization": config.optimization.enabled,
            "multilang": config.multilang.enabled,
            "openai": config.openai.enabled,
            "realtime": config.optimization.real_time,
            "performance": config.performance.enabled,
        }

    async def build_active_set(self, config: AnalyzerConfig) -> List[Component]:
        """
        Construct and initialize every active component in declaration order.

        A failing component does not stop the remaining ones from being
        attempted. If anything failed, the components that did come up are
        shut down again and the failures are raised together.

        Raises:
            InitializationError: If any component failed to construct or initialize
        """
        components: List[Component] = []
        failures: Dict[str, BaseException] = {}

        for spec in self.specs:
            if not spec.is_active(config, self.settings):
                continue
            factory = self.overrides.get(spec.kind, spec.factory)
            try:
                component = factory(config, self.settings)
                await component.initialize()
            except Exception as e:
                logger.error(
                    f"Component {spec.kind.value} failed to initialize: {e}",
                    extra={"component": spec.kind.value, "exception_type": type(e).__name__}
                )
                failures[spec.kind.value] = e
                continue
            components.append(component)
            logger.info(f"Component {spec.kind.value} initialized")

        if failures:
            await self._rollback(components)
            raise InitializationError(failures)

        return components

    async def _rollback(self, components: List[Component]) -> None:
        for component in reversed(components):
            try:
                await component.shutdown()
            except Exception as e:
                logger.error(f"Rollback shutdown of {component.name} failed: {e}")
