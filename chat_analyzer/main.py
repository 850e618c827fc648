"""
FastAPI application entry point for the chat analyzer service.

The service wraps one ChatAnalyzer instance:
- Single message analysis
- Conversation analysis with summary and insights
- Status, supported features and performance metrics
"""

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_analyzer.core.config import Settings, get_settings
from chat_analyzer.core.exceptions import (
    AggregateShutdownError,
    AnalysisError,
    ConfigurationError,
    NotInitializedError,
    ValidationError,
    analysis_exception_handler,
    general_exception_handler,
    not_initialized_exception_handler,
    validation_exception_handler,
)
from chat_analyzer.core.logging import get_logger, setup_logging
from chat_analyzer.features.analysis import ChatAnalyzer, router as analysis_router
from chat_analyzer.shared.middleware import error_handling_middleware, request_logging_middleware

logger = get_logger(__name__)


def load_analyzer_config(path: Optional[str]) -> Dict[str, Any]:
    """
    Read analyzer configuration from a JSON file.

    Raises:
        ConfigurationError: If the file is missing or not a JSON object
    """
    if not path:
        return {}
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot load analyzer configuration from {path}: {e}",
            error_code="CONFIG_FILE_INVALID"
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Analyzer configuration in {path} must be a JSON object",
            error_code="CONFIG_FILE_INVALID"
        )
    return data


def create_application(
    settings: Optional[Settings] = None,
    analyzer_config: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Overrides the cached settings
        analyzer_config: Overrides ``Settings.ANALYZER_CONFIG_FILE``
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config = analyzer_config if analyzer_config is not None else load_analyzer_config(settings.ANALYZER_CONFIG_FILE)
        analyzer = ChatAnalyzer(config, settings=settings)
        logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")
        await analyzer.initialize()
        app.state.chat_analyzer = analyzer

        yield

        logger.info(f"Shutting down {settings.APP_NAME}")
        try:
            await analyzer.shutdown()
        except AggregateShutdownError as e:
            logger.error(f"Shutdown completed with errors: {e.message}", extra={"details": e.details})

    app = FastAPI(
        title=settings.APP_NAME,
        description="Sentiment, intent and quality analysis for chat messages and conversations",
        version=settings.API_VERSION,
        docs_url="/api/docs" if not settings.is_production() else None,
        redoc_url="/api/redoc" if not settings.is_production() else None,
        openapi_url="/api/openapi.json" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.middleware("http")(error_handling_middleware)
    app.middleware("http")(request_logging_middleware)

    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(NotInitializedError, not_initialized_exception_handler)
    app.add_exception_handler(AnalysisError, analysis_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(
        analysis_router,
        prefix="/api/v1/analysis",
        tags=["Chat Analysis"]
    )

    @app.get("/", tags=["Health"])
    async def root():  # type: ignore[misc]
        """Root endpoint providing API information."""
        return {
            "message": settings.APP_NAME,
            "version": settings.API_VERSION,
            "environment": settings.ENVIRONMENT,
            "status": "healthy"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():  # type: ignore[misc]
        """Health check endpoint, reports analyzer readiness."""
        analyzer = getattr(app.state, "chat_analyzer", None)
        return {
            "status": "healthy",
            "ready": bool(analyzer and analyzer.is_initialized),
            "timestamp": settings.get_current_timestamp(),
            "version": settings.API_VERSION
        }

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "chat_analyzer.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
