"""
Sliding-window statistics over the live message stream.
"""

import time
from collections import deque
from typing import Any, Callable, Deque, Dict, Optional, Tuple

from chat_analyzer.components.base import Analyzer
from chat_analyzer.core.config import OptimizationConfig


class RealTimeAnalyzer(Analyzer):
    """
    Tracks messages seen within the last ``window_seconds``.

    Reports the window population, its rate per minute, the average message
    length and a ``burst`` flag once the population reaches ``burst_threshold``.
    The window is internal state of this analyzer only.
    """

    name = "realtime"
    result_key = "realtime"

    def __init__(self, config: Optional[OptimizationConfig] = None, clock: Callable[[], float] = time.monotonic):
        super().__init__(config or OptimizationConfig(real_time=True))
        self._clock = clock
        self._window: Deque[Tuple[float, int]] = deque()

    async def teardown(self) -> None:
        self._window.clear()

    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        now = self._clock()
        window_seconds = self.config.window_seconds

        self._window.append((now, len(message)))
        while self._window and now - self._window[0][0] > window_seconds:
            self._window.popleft()

        count = len(self._window)
        return {
            "window_size": window_seconds,
            "messages_in_window": count,
            "messages_per_minute": count * 60.0 / window_seconds,
            "average_length": sum(length for _, length in self._window) / count,
            "burst": count >= self.config.burst_threshold,
        }
