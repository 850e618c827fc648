"""
Chat analysis API routes.
"""

from typing import Dict

from fastapi import APIRouter, Depends

from chat_analyzer.core.dependencies import get_chat_analyzer
from chat_analyzer.core.exceptions import ValidationError
from chat_analyzer.features.analysis.services import ChatAnalyzer
from chat_analyzer.shared.schemas import (
    ConversationAnalysis,
    ConversationAnalysisRequest,
    ErrorResponse,
    MessageAnalysis,
    MessageAnalysisRequest,
    SystemStatus,
)
from chat_analyzer.shared.utils import sanitize_text

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post("/message", response_model=MessageAnalysis, responses=ERROR_RESPONSES)
async def analyze_message(
    request: MessageAnalysisRequest,
    analyzer: ChatAnalyzer = Depends(get_chat_analyzer)
) -> MessageAnalysis:
    """
    Analyze a single message with every enabled analyzer.
    """
    message = sanitize_text(request.message)
    if not message:
        raise ValidationError("Message cannot be empty")

    return await analyzer.analyze_message(message, request.context)


@router.post("/conversation", response_model=ConversationAnalysis, responses=ERROR_RESPONSES)
async def analyze_conversation(
    request: ConversationAnalysisRequest,
    analyzer: ChatAnalyzer = Depends(get_chat_analyzer)
) -> ConversationAnalysis:
    """
    Analyze a conversation message by message and summarize it.

    Every message must be non-blank; an empty conversation yields an empty summary.
    """
    messages = [sanitize_text(raw) for raw in request.messages]
    blank = [index for index, message in enumerate(messages) if not message]
    if blank:
        raise ValidationError(
            "Conversation messages cannot be empty",
            error_code="EMPTY_MESSAGE",
            details={"indexes": blank}
        )

    return await analyzer.analyze_conversation(messages, request.context)


@router.get("/status", response_model=SystemStatus)
async def system_status(analyzer: ChatAnalyzer = Depends(get_chat_analyzer)) -> SystemStatus:
    """Point-in-time analyzer status."""
    return analyzer.get_system_status()


@router.get("/features")
async def supported_features(analyzer: ChatAnalyzer = Depends(get_chat_analyzer)) -> Dict[str, bool]:
    """Features enabled by the effective configuration."""
    return analyzer.get_supported_features()


@router.get("/metrics")
async def performance_metrics(analyzer: ChatAnalyzer = Depends(get_chat_analyzer)) -> Dict[str, Dict[str, float]]:
    """Operation timings collected by the performance monitor."""
    return analyzer.get_performance_metrics()
