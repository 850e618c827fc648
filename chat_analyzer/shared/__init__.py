"""
Shared components and utilities initialization.
"""

from chat_analyzer.shared.schemas import (
    MessageAnalysis,
    ConversationSummary,
    ConversationInsights,
    ConversationAnalysis,
    SystemStatus,
    MessageAnalysisRequest,
    ConversationAnalysisRequest,
    ErrorResponse,
)

from chat_analyzer.shared.utils import (
    retry_with_backoff,
    sanitize_text,
    validate_openai_response,
    Timer,
)

__all__ = [
    # Schemas
    "MessageAnalysis",
    "ConversationSummary",
    "ConversationInsights",
    "ConversationAnalysis",
    "SystemStatus",
    "MessageAnalysisRequest",
    "ConversationAnalysisRequest",
    "ErrorResponse",
    # Utils
    "retry_with_backoff",
    "sanitize_text",
    "validate_openai_response",
    "Timer",
]
