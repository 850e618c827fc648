"""
Lifecycle and analysis event publishing.

Subscribers register per event name (or ``"*"`` for every event). Handlers may
be plain callables or coroutine functions. A failing handler is logged and
never interrupts the caller that emitted the event.
"""

import inspect
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, DefaultDict, Dict, List, Optional

from pydantic import BaseModel, Field

from chat_analyzer.core.logging import get_logger

logger = get_logger(__name__)

INITIALIZED = "initialized"
MESSAGE_ANALYZED = "messageAnalyzed"
CONVERSATION_ANALYZED = "conversationAnalyzed"
ERROR = "error"
SHUTDOWN = "shutdown"

EVENT_NAMES = (INITIALIZED, MESSAGE_ANALYZED, CONVERSATION_ANALYZED, ERROR, SHUTDOWN)
ALL_EVENTS = "*"

EventHandler = Callable[["AnalyzerEvent"], Any]


class AnalyzerEvent(BaseModel):
    """A named event with its emission time and payload."""

    name: str = Field(description="Event name")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Emission time")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Event specific data")


class EventBus:
    """In-process publisher for analyzer events."""

    def __init__(self):
        self._handlers: DefaultDict[str, List[EventHandler]] = defaultdict(list)

    def subscribe(self, event: str, handler: EventHandler) -> None:
        if event != ALL_EVENTS and event not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {event}")
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: EventHandler) -> bool:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    async def emit(self, name: str, payload: Optional[Dict[str, Any]] = None) -> AnalyzerEvent:
        """
        Deliver an event to its subscribers in subscription order.

        Args:
            name: One of ``EVENT_NAMES``
            payload: Event data

        Returns:
            The delivered event
        """
        event = AnalyzerEvent(name=name, payload=payload or {})
        for handler in list(self._handlers.get(name, [])) + list(self._handlers.get(ALL_EVENTS, [])):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(
                    f"Event handler failed for '{name}': {e}",
                    extra={"event": name, "handler": getattr(handler, "__name__", repr(handler))}
                )
        return event
