"""
Shared Pydantic models for analysis records and request/response schemas.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


EmotionalTrend = Literal["positive", "neutral", "negative"]


# Analysis records

class MessageAnalysis(BaseModel):
    """Analysis of a single message, one entry per active analyzer."""

    id: str = Field(description="Unique analysis identifier")
    message: str = Field(description="Analyzed message")
    context: Dict[str, Any] = Field(default_factory=dict, description="Caller supplied context")
    timestamp: datetime = Field(default_factory=utcnow, description="Analysis start time")
    results: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Analyzer outputs keyed by analyzer result key"
    )
    processing_time: float = Field(default=0.0, description="Wall-clock milliseconds until all analyzers settled")

    class Config:
        frozen = True


class ConversationSummary(BaseModel):
    """Conversation level statistics derived from per-message analyses."""

    total_messages: int = Field(default=0, description="Number of analyzed messages")
    average_sentiment: float = Field(default=0.0, description="Mean sentiment score over messages that reported one")
    dominant_intent: Optional[str] = Field(default=None, description="Most frequent intent label")
    average_quality: float = Field(default=0.0, description="Mean quality score over messages that reported one")
    key_topics: List[str] = Field(default_factory=list, description="Most frequent intent keywords")
    emotional_trend: EmotionalTrend = Field(default="neutral", description="Coarse classification of average sentiment")

    class Config:
        frozen = True


class ConversationInsights(BaseModel):
    """Advisory strings derived from a conversation summary."""

    recommendations: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    patterns: List[str] = Field(default_factory=list)
    alerts: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class ConversationAnalysis(BaseModel):
    """Analysis of a whole conversation."""

    id: str = Field(description="Unique analysis identifier")
    conversation: List[str] = Field(description="Source messages in conversation order")
    context: Dict[str, Any] = Field(default_factory=dict, description="Caller supplied context")
    timestamp: datetime = Field(default_factory=utcnow, description="Analysis start time")
    messages: List[MessageAnalysis] = Field(default_factory=list, description="Per-message analyses in input order")
    summary: ConversationSummary = Field(default_factory=ConversationSummary)
    insights: ConversationInsights = Field(default_factory=ConversationInsights)
    processing_time: float = Field(default=0.0, description="Wall-clock milliseconds for the whole conversation")

    class Config:
        frozen = True


class SystemStatus(BaseModel):
    """Point-in-time snapshot of the analyzer."""

    initialized: bool = Field(description="Whether the analyzer is ready to accept analysis calls")
    state: str = Field(description="Lifecycle state name")
    analysis_count: int = Field(description="Messages analyzed successfully since construction")
    uptime: float = Field(description="Seconds since construction")
    components: Dict[str, bool] = Field(description="Presence of each component kind in the active set")
    timestamp: datetime = Field(default_factory=utcnow)

    class Config:
        frozen = True


# Request models

class MessageAnalysisRequest(BaseModel):
    """Request to analyze a single message."""

    message: str = Field(description="Message text", min_length=1)
    context: Dict[str, Any] = Field(default_factory=dict, description="Optional analysis context, e.g. topic or intent")


class ConversationAnalysisRequest(BaseModel):
    """Request to analyze a conversation."""

    messages: List[str] = Field(description="Messages in chronological order")
    context: Dict[str, Any] = Field(default_factory=dict, description="Optional analysis context")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: Dict[str, Any] = Field(description="Error type, code, message and details")
