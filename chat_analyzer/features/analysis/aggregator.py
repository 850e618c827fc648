"""
Conversation level aggregation of per-message analyses.
"""

import uuid
from collections import Counter
from datetime import datetime, timezone
from numbers import Real
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from chat_analyzer.components import PerformanceMonitor
from chat_analyzer.components.intent import UNKNOWN_INTENT
from chat_analyzer.core.logging import get_logger
from chat_analyzer.shared.schemas import (
    ConversationAnalysis,
    ConversationInsights,
    ConversationSummary,
    MessageAnalysis,
)
from chat_analyzer.shared.utils import Timer

logger = get_logger(__name__)

POSITIVE_TREND_THRESHOLD = 0.1
NEGATIVE_TREND_THRESHOLD = -0.1
LOW_QUALITY_THRESHOLD = 0.6
LONG_CONVERSATION_THRESHOLD = 10
MAX_KEY_TOPICS = 5

QUALITY_RECOMMENDATION = "Consider improving response quality"
SENTIMENT_RECOMMENDATION = "Address negative sentiment in conversation"
TONE_IMPROVEMENT = "Focus on more positive language"
LONG_CONVERSATION_PATTERN = "Long conversation detected"

MessageAnalyzerFn = Callable[[str, Optional[Dict[str, Any]]], Awaitable[MessageAnalysis]]


class ConversationAggregator:
    """
    Analyzes a conversation message by message and summarizes the results.

    Messages are processed strictly in input order; message ``i + 1`` starts
    only after message ``i`` settled. The first failing message aborts the
    conversation and its error propagates.
    """

    def __init__(self, analyze_message: MessageAnalyzerFn, monitor: Optional[PerformanceMonitor] = None):
        self._analyze_message = analyze_message
        self.monitor = monitor

    async def aggregate(
        self,
        conversation: Sequence[str],
        context: Optional[Dict[str, Any]] = None,
    ) -> ConversationAnalysis:
        conversation = list(conversation)
        context = dict(context or {})
        conversation_id = uuid.uuid4().hex
        timestamp = datetime.now(timezone.utc)

        with Timer("conversation_analysis") as timer:
            messages: List[MessageAnalysis] = []
            for message in conversation:
                messages.append(await self._analyze_message(message, context))

            summary = summarize(messages)
            insights = derive_insights(summary)
        processing_time = timer.duration_ms

        if self.monitor is not None:
            self.monitor.record("analyze_conversation", processing_time)

        logger.info(
            f"Conversation analyzed in {processing_time:.1f}ms",
            extra={
                "conversation_id": conversation_id,
                "message_count": len(messages),
                "processing_time": processing_time,
            }
        )
        return ConversationAnalysis(
            id=conversation_id,
            conversation=conversation,
            context=context,
            timestamp=timestamp,
            messages=messages,
            summary=summary,
            insights=insights,
            processing_time=processing_time,
        )


def summarize(messages: Sequence[MessageAnalysis]) -> ConversationSummary:
    """
    Compute conversation statistics from per-message analyses.

    Averages only include messages whose analyzer reported a numeric score
    and default to 0 when none did.
    """
    average_sentiment = mean(_result_values(messages, "sentiment", "score"))
    intents = [
        i for i in _result_values(messages, "intent", "intent", numeric=False)
        if i is not None and i != UNKNOWN_INTENT
    ]

    return ConversationSummary(
        total_messages=len(messages),
        average_sentiment=average_sentiment,
        dominant_intent=dominant_label(intents),
        average_quality=mean(_result_values(messages, "quality", "score")),
        key_topics=key_topics(messages),
        emotional_trend=emotional_trend(average_sentiment),
    )


def derive_insights(summary: ConversationSummary) -> ConversationInsights:
    """
    Turn a summary into advisory strings.

    Every rule is checked; all that apply fire. Nothing fires for an empty
    conversation.
    """
    recommendations: List[str] = []
    improvements: List[str] = []
    patterns: List[str] = []

    if summary.total_messages > 0 and summary.average_quality < LOW_QUALITY_THRESHOLD:
        recommendations.append(QUALITY_RECOMMENDATION)
    if summary.emotional_trend == "negative":
        recommendations.append(SENTIMENT_RECOMMENDATION)
    if summary.average_sentiment < 0:
        improvements.append(TONE_IMPROVEMENT)
    if summary.total_messages > LONG_CONVERSATION_THRESHOLD:
        patterns.append(LONG_CONVERSATION_PATTERN)

    return ConversationInsights(
        recommendations=recommendations,
        improvements=improvements,
        patterns=patterns,
        alerts=[],
    )


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def dominant_label(labels: Sequence[str]) -> Optional[str]:
    """Most frequent label; ties go to the label seen first. ``None`` for no labels."""
    if not labels:
        return None
    counts = Counter(labels)
    best = max(counts.values())
    # labels preserves encounter order, so the first hit is the earliest tied label
    return next(label for label in labels if counts[label] == best)


def emotional_trend(average_sentiment: float) -> str:
    if average_sentiment > POSITIVE_TREND_THRESHOLD:
        return "positive"
    if average_sentiment < NEGATIVE_TREND_THRESHOLD:
        return "negative"
    return "neutral"


def key_topics(messages: Sequence[MessageAnalysis], limit: int = MAX_KEY_TOPICS) -> List[str]:
    keywords: List[str] = []
    for analysis in messages:
        intent = analysis.results.get("intent") or {}
        keywords.extend(k for k in intent.get("keywords") or [] if isinstance(k, str) and k.strip() not in ("", "?"))
    counts = Counter(keywords)
    first_seen = {k: i for i, k in reversed(list(enumerate(keywords)))}
    return sorted(counts, key=lambda k: (-counts[k], first_seen[k]))[:limit]


def _result_values(messages: Sequence[MessageAnalysis], key: str, field: str, numeric: bool = True) -> List[Any]:
    values = []
    for analysis in messages:
        result = analysis.results.get(key)
        if not isinstance(result, dict) or field not in result:
            continue
        value = result[field]
        if numeric and (not isinstance(value, Real) or isinstance(value, bool)):
            continue
        values.append(value)
    return values
