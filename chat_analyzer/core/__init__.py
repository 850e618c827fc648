"""
Core initialization module.
"""

from chat_analyzer.core.config import get_settings, Settings, AnalyzerConfig, deep_merge
from chat_analyzer.core.logging import setup_logging, get_logger
from chat_analyzer.core.events import AnalyzerEvent, EventBus
from chat_analyzer.core.exceptions import (
    ApplicationError,
    ValidationError,
    ServiceError,
    OpenAIError,
    ConfigurationError,
    NotInitializedError,
    LifecycleError,
    AnalysisError,
    InitializationError,
    AggregateShutdownError,
)

__all__ = [
    "get_settings",
    "Settings",
    "AnalyzerConfig",
    "deep_merge",
    "setup_logging",
    "get_logger",
    "AnalyzerEvent",
    "EventBus",
    "ApplicationError",
    "ValidationError",
    "ServiceError",
    "OpenAIError",
    "ConfigurationError",
    "NotInitializedError",
    "LifecycleError",
    "AnalysisError",
    "InitializationError",
    "AggregateShutdownError",
]
