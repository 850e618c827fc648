"""
Shared utilities for the application.
"""

import asyncio
import time
from typing import Any, Callable, Optional, TypeVar
from functools import wraps

from chat_analyzer.core.logging import get_logger
from chat_analyzer.core.exceptions import ServiceError, ValidationError

logger = get_logger(__name__)

T = TypeVar('T')


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 1.0,
    exceptions: tuple = (Exception,)
) -> Callable:
    """
    Decorator for retrying coroutine functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts
        backoff_factor: Multiplier for delay between retries
        exceptions: Tuple of exceptions to catch and retry on
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            last_exception = None

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    if attempt == max_retries:
                        break

                    delay = backoff_factor * (2 ** attempt)
                    logger.warning(
                        f"Attempt {attempt + 1} failed, retrying in {delay}s: {str(e)}",
                        extra={"function": func.__name__, "attempt": attempt + 1}
                    )
                    await asyncio.sleep(delay)

            logger.error(
                f"All {max_retries + 1} attempts failed for {func.__name__}",
                extra={"function": func.__name__, "final_exception": str(last_exception)}
            )
            raise ServiceError(
                f"Function {func.__name__} failed after {max_retries + 1} attempts",
                error_code="MAX_RETRIES_EXCEEDED",
                details={"last_exception": str(last_exception)}
            ) from last_exception

        return wrapper

    return decorator


def sanitize_text(text: Any, max_length: int = 10000) -> str:
    """
    Sanitize and validate text input.

    Args:
        text: Input text to sanitize
        max_length: Maximum allowed text length

    Returns:
        Stripped text, empty for non-string input

    Raises:
        ValidationError: If the stripped text is longer than ``max_length``
    """
    if not text or not isinstance(text, str):
        return ""

    sanitized = text.strip()

    if len(sanitized) > max_length:
        raise ValidationError(
            f"Text exceeds {max_length} characters",
            error_code="TEXT_TOO_LONG",
            details={"length": len(sanitized), "max_length": max_length}
        )

    return sanitized


def validate_openai_response(response: Any) -> bool:
    """
    Validate OpenAI chat completion response structure.

    Args:
        response: OpenAI API response

    Returns:
        True if the first choice carries message content
    """
    try:
        if not response or not getattr(response, "choices", None):
            return False
        message = getattr(response.choices[0], "message", None)
        return bool(message is not None and message.content)
    except (AttributeError, IndexError, TypeError) as e:
        logger.warning(f"Error validating OpenAI response: {e}")
        return False


class Timer:
    """Context manager for timing operations."""

    def __init__(self, name: str = "operation"):
        self.name = name
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        logger.debug(f"{self.name} completed in {self.duration_ms:.2f} ms")

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds; measured up to now while the block is still running."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return (end - self.start_time) * 1000.0
