"""
Core dependencies for dependency injection.
"""

from typing import Any, Optional

from fastapi import Request
from openai import AsyncOpenAI

from chat_analyzer.core.exceptions import ConfigurationError, NotInitializedError
from chat_analyzer.core.logging import get_logger

logger = get_logger(__name__)


def create_openai_client(api_key: Optional[str], timeout: float = 30.0) -> AsyncOpenAI:
    """
    Create an OpenAI client for a credential. The caller owns and closes it.

    Args:
        api_key: OpenAI API key
        timeout: Request timeout in seconds

    Returns:
        Configured AsyncOpenAI client

    Raises:
        ConfigurationError: If no API key is given
    """
    if not api_key:
        raise ConfigurationError(
            "OpenAI API key not configured",
            error_code="OPENAI_API_KEY_MISSING"
        )

    logger.info("Creating OpenAI client", extra={"timeout": timeout})
    return AsyncOpenAI(
        api_key=api_key,
        timeout=timeout,
        max_retries=0,
    )


def get_chat_analyzer(request: Request) -> Any:
    """
    Get the application-wide ChatAnalyzer created by the app lifespan.

    Raises:
        NotInitializedError: If the service started without an analyzer
    """
    analyzer = getattr(request.app.state, "chat_analyzer", None)
    if analyzer is None:
        raise NotInitializedError("Chat analyzer is not available", error_code="ANALYZER_UNAVAILABLE")
    return analyzer
