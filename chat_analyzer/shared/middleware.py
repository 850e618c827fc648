"""
HTTP middleware for the analysis service.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from chat_analyzer.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def request_logging_middleware(request: Request, call_next: Callable) -> Response:
    """
    Tag each request with an id (the caller's ``X-Request-ID`` if sent) and
    log its outcome and duration.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    start_time = time.perf_counter()

    response = await call_next(request)

    duration_ms = (time.perf_counter() - start_time) * 1000.0
    logger.info(
        f"{request.method} {request.url.path} - {response.status_code}",
        extra={"request_id": request_id, "status_code": response.status_code, "duration_ms": round(duration_ms, 2)}
    )

    response.headers[REQUEST_ID_HEADER] = request_id
    response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"
    return response


async def error_handling_middleware(request: Request, call_next: Callable) -> Response:
    """
    Turn exceptions no exception handler claimed into a 500 carrying the request id.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        request_id = getattr(request.state, "request_id", None)
        logger.error(
            f"Unhandled exception in middleware: {exc}",
            extra={"request_id": request_id, "path": request.url.path, "exception_type": type(exc).__name__},
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "type": "internal_error",
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "An unexpected error occurred",
                    "request_id": request_id,
                }
            }
        )
