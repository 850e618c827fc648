"""Base classes for pipeline components and message analyzers."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel

from chat_analyzer.core.exceptions import AnalysisError, NotInitializedError
from chat_analyzer.core.logging import get_logger
from chat_analyzer.shared.utils import Timer


class Component(ABC):
    """
    Lifecycle shared by everything the registry builds.

    ``initialize`` and ``shutdown`` are idempotent. Subclasses put their work
    in ``setup`` and ``teardown``; ``teardown`` only runs after a successful
    ``setup`` and at most once.
    """

    name: str = "component"

    def __init__(self, config: Optional[BaseModel] = None):
        self.config = config
        self.logger = get_logger(f"{__name__}.{self.name}")
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        if self._initialized:
            return
        self.logger.info(f"Initializing component: {self.name}")
        await self.setup()
        self._initialized = True

    async def shutdown(self) -> None:
        if not self._initialized:
            return
        self._initialized = False
        self.logger.info(f"Shutting down component: {self.name}")
        await self.teardown()

    async def setup(self) -> None:
        """Acquire resources. Raising here fails initialization."""

    async def teardown(self) -> None:
        """Release resources acquired in ``setup``."""


class Analyzer(Component):
    """
    A component producing one structured judgment per message.

    ``analyze`` stamps ``processing_time`` (ms) and ``timestamp`` onto the
    subclass output and wraps any failure in ``AnalysisError``.
    """

    result_key: str = "analysis"

    async def analyze(self, message: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self._initialized:
            raise NotInitializedError(
                f"Analyzer '{self.name}' is not initialized",
                error_code="ANALYZER_NOT_INITIALIZED"
            )

        try:
            with Timer(f"{self.name}_analysis") as timer:
                result = await self._analyze(message, context or {})
        except AnalysisError:
            raise
        except Exception as e:
            self.logger.error(f"{self.name} analysis failed: {e}")
            raise AnalysisError(self.name, e) from e

        output = dict(result)
        output["timestamp"] = datetime.now(timezone.utc)
        output["processing_time"] = timer.duration_ms
        return output

    @abstractmethod
    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        """Return this analyzer's judgment about ``message``."""
