"""
Custom exceptions and exception handlers for the application.
"""

from typing import Any, Dict, List, Mapping, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from chat_analyzer.core.logging import get_logger

logger = get_logger(__name__)


class ApplicationError(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ApplicationError):
    """Raised when input validation fails."""
    pass


class ServiceError(ApplicationError):
    """Raised when external service calls fail."""
    pass


class OpenAIError(ServiceError):
    """Raised when OpenAI API calls fail."""
    pass


class ConfigurationError(ApplicationError):
    """Raised when configuration is invalid."""
    pass


class NotInitializedError(ApplicationError):
    """Raised when analysis is requested outside the ready window."""
    pass


class LifecycleError(ApplicationError):
    """Raised on an invalid lifecycle transition, e.g. re-initializing after shutdown."""
    pass


class AnalysisError(ApplicationError):
    """
    Raised when a single analyzer fails while analyzing a message.

    ``cause`` is the original exception; ``related`` holds failures of other
    analyzers from the same fan-out.
    """

    def __init__(
        self,
        analyzer: str,
        cause: Optional[BaseException] = None,
        message: Optional[str] = None,
    ):
        self.analyzer = analyzer
        self.cause = cause
        self.related: List["AnalysisError"] = []
        super().__init__(
            message or f"Analyzer '{analyzer}' failed: {cause!s}",
            error_code="ANALYSIS_FAILED",
            details={
                "analyzer": analyzer,
                "cause": type(cause).__name__ if cause is not None else None,
            }
        )
        if cause is not None:
            self.__cause__ = cause


class InitializationError(ApplicationError):
    """Raised when one or more components fail to construct or initialize."""

    def __init__(self, failures: Mapping[str, BaseException]):
        self.failures = dict(failures)
        super().__init__(
            f"Failed to initialize components: {', '.join(self.failures)}",
            error_code="INITIALIZATION_FAILED",
            details={name: str(exc) for name, exc in self.failures.items()}
        )


class AggregateShutdownError(ApplicationError):
    """Raised after teardown completes when one or more components failed to shut down."""

    def __init__(self, failures: Mapping[str, BaseException]):
        self.failures = dict(failures)
        super().__init__(
            f"Failed to shut down components: {', '.join(self.failures)}",
            error_code="SHUTDOWN_FAILED",
            details={name: str(exc) for name, exc in self.failures.items()}
        )


def _error_content(error_type: str, exc: ApplicationError, message: Optional[str] = None) -> Dict[str, Any]:
    return {
        "error": {
            "type": error_type,
            "code": exc.error_code,
            "message": message or exc.message,
            "details": exc.details,
        }
    }


async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors."""
    logger.warning(
        f"Validation error: {exc.message}",
        extra={
            "error_code": exc.error_code,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(status_code=400, content=_error_content("validation_error", exc))


async def not_initialized_exception_handler(request: Request, exc: NotInitializedError) -> JSONResponse:
    """Handle analysis requests made while the analyzer is not ready."""
    logger.warning(
        f"Analyzer not ready: {exc.message}",
        extra={"path": request.url.path, "method": request.method}
    )
    return JSONResponse(
        status_code=503,
        content=_error_content("not_initialized", exc, "Analyzer is not ready")
    )


async def analysis_exception_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    """Handle analyzer failures."""
    logger.error(
        f"Analysis error: {exc.message}",
        extra={
            "analyzer": exc.analyzer,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(status_code=502, content=_error_content("analysis_error", exc))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors."""
    logger.error(
        f"Unexpected error: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "type": "internal_error",
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
            }
        }
    )
