"""
Shared fixtures and fake components for the test suite.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest

from chat_analyzer.components import Analyzer, Component
from chat_analyzer.core.config import Settings
from chat_analyzer.features.analysis.registry import ComponentKind, ComponentRegistry

Output = Union[Dict[str, Any], Callable[[str], Dict[str, Any]]]


class FakeAnalyzer(Analyzer):
    """Analyzer with scripted output, failures and delays that records its calls."""

    def __init__(
        self,
        name: str,
        output: Optional[Output] = None,
        result_key: Optional[str] = None,
        error: Optional[Exception] = None,
        fail_on: Optional[str] = None,
        delay: float = 0.0,
        init_error: Optional[Exception] = None,
        shutdown_error: Optional[Exception] = None,
    ):
        self.name = name
        self.result_key = result_key or name
        super().__init__()
        self.output = output
        self.error = error
        self.fail_on = fail_on
        self.delay = delay
        self.init_error = init_error
        self.shutdown_error = shutdown_error
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.setup_calls = 0
        self.teardown_calls = 0

    async def setup(self) -> None:
        self.setup_calls += 1
        if self.init_error is not None:
            raise self.init_error

    async def teardown(self) -> None:
        self.teardown_calls += 1
        if self.shutdown_error is not None:
            raise self.shutdown_error

    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append((message, context))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None and (self.fail_on is None or self.fail_on == message):
            raise self.error
        if callable(self.output):
            return self.output(message)
        return dict(self.output or {})


class FakeComponent(Component):
    def __init__(self, name: str, shutdown_error: Optional[Exception] = None):
        self.name = name
        super().__init__()
        self.shutdown_error = shutdown_error
        self.teardown_calls = 0

    async def teardown(self) -> None:
        self.teardown_calls += 1
        if self.shutdown_error is not None:
            raise self.shutdown_error


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, OPENAI_API_KEY=None, ANALYZER_TIMEOUT=5.0, LOG_LEVEL="WARNING")


@pytest.fixture
def make_registry(settings):
    """Build a registry whose factories return the given component instances."""

    def _make(**components: Component) -> ComponentRegistry:
        overrides = {
            ComponentKind(kind): (lambda config, s, component=component: component)
            for kind, component in components.items()
        }
        return ComponentRegistry(settings=settings, overrides=overrides)

    return _make


def scored(sentiment: float = 0.0, quality: float = 0.9, intent: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """Fake analyzer outputs in the shape the aggregator reads."""
    return {
        "sentiment": {"score": sentiment},
        "quality": {"score": quality},
        "intent": {"intent": intent, "keywords": []},
    }
