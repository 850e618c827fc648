"""
Chat message and conversation analysis.
"""

from chat_analyzer.core.exceptions import (
    AggregateShutdownError,
    AnalysisError,
    ConfigurationError,
    InitializationError,
    LifecycleError,
    NotInitializedError,
)
from chat_analyzer.features.analysis import ChatAnalyzer, ComponentKind, LifecycleState

__all__ = [
    "ChatAnalyzer",
    "ComponentKind",
    "LifecycleState",
    "AggregateShutdownError",
    "AnalysisError",
    "ConfigurationError",
    "InitializationError",
    "LifecycleError",
    "NotInitializedError",
]
