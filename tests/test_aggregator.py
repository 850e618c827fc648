"""
Tests for conversation summaries and insights.
"""

from typing import Any, Dict

import pytest

from chat_analyzer.core.exceptions import AnalysisError
from chat_analyzer.features.analysis.aggregator import (
    LONG_CONVERSATION_PATTERN,
    QUALITY_RECOMMENDATION,
    SENTIMENT_RECOMMENDATION,
    TONE_IMPROVEMENT,
    ConversationAggregator,
    derive_insights,
    dominant_label,
    emotional_trend,
    key_topics,
    summarize,
)
from chat_analyzer.features.analysis.pipeline import MessagePipeline
from chat_analyzer.shared.schemas import ConversationSummary, MessageAnalysis

from conftest import FakeAnalyzer, scored


def analysis(results: Dict[str, Any], message: str = "message") -> MessageAnalysis:
    return MessageAnalysis(id="test", message=message, results=results)


def summary(**overrides) -> ConversationSummary:
    fields = {
        "total_messages": 3,
        "average_sentiment": 0.5,
        "dominant_intent": "question",
        "average_quality": 0.9,
        "key_topics": [],
        "emotional_trend": "positive",
    }
    fields.update(overrides)
    return ConversationSummary(**fields)


class TestSummarize:
    """Test conversation statistics."""

    def test_averages_only_reported_scores(self):
        result = summarize([
            analysis({"sentiment": {"score": 0.5}, "quality": {"score": 0.8}}),
            analysis({"conversation": {"word_count": 3}}),
            analysis({"sentiment": {"score": -0.1}, "quality": {"score": "n/a"}}),
        ])
        assert result.total_messages == 3
        assert result.average_sentiment == pytest.approx(0.2)
        assert result.average_quality == pytest.approx(0.8)
        assert result.emotional_trend == "positive"

    def test_no_scores_default_to_zero(self):
        result = summarize([analysis({}), analysis({})])
        assert result.average_sentiment == 0
        assert result.average_quality == 0
        assert result.dominant_intent is None
        assert result.emotional_trend == "neutral"

    def test_empty_conversation(self):
        result = summarize([])
        assert result.total_messages == 0
        assert result.average_sentiment == 0
        assert result.dominant_intent is None
        assert result.key_topics == []
        assert result.emotional_trend == "neutral"

    def test_dominant_intent(self):
        result = summarize([analysis(scored(intent=i)) for i in ["greeting", "question", "question"]])
        assert result.dominant_intent == "question"

    def test_unknown_intent_is_not_a_label(self):
        result = summarize([analysis(scored(intent="unknown")) for _ in range(2)])
        assert result.dominant_intent is None

        result = summarize([analysis(scored(intent=i)) for i in ["unknown", "unknown", "thanks"]])
        assert result.dominant_intent == "thanks"


class TestDominantLabel:
    """Ties go to the label encountered first."""

    def test_tie_first_seen(self):
        assert dominant_label(["a", "b", "a", "b"]) == "a"
        assert dominant_label(["b", "a", "a", "b"]) == "b"

    def test_majority(self):
        assert dominant_label(["a", "b", "b"]) == "b"

    def test_empty(self):
        assert dominant_label([]) is None


class TestEmotionalTrend:
    """Thresholds are exclusive."""

    def test_boundaries(self):
        assert emotional_trend(0.1) == "neutral"
        assert emotional_trend(0.1000001) == "positive"
        assert emotional_trend(-0.1) == "neutral"
        assert emotional_trend(-0.1000001) == "negative"
        assert emotional_trend(0) == "neutral"


class TestKeyTopics:

    def test_frequency_then_first_seen(self):
        messages = [
            analysis({"intent": {"keywords": ["help", "order"]}}),
            analysis({"intent": {"keywords": ["price", "order", "?"]}}),
            analysis({"intent": {"keywords": ["help", "refund"]}}),
        ]
        assert key_topics(messages) == ["help", "order", "price", "refund"]

    def test_capped(self):
        messages = [analysis({"intent": {"keywords": list("abcdefg")}})]
        assert key_topics(messages) == ["a", "b", "c", "d", "e"]

    def test_without_intent(self):
        assert key_topics([analysis({"sentiment": {"score": 1}})]) == []


class TestDeriveInsights:
    """Every applicable rule fires."""

    def test_healthy_conversation(self):
        insights = derive_insights(summary())
        assert insights.recommendations == []
        assert insights.improvements == []
        assert insights.patterns == []
        assert insights.alerts == []

    def test_all_rules(self):
        insights = derive_insights(summary(
            total_messages=12,
            average_sentiment=-0.5,
            average_quality=0.3,
            emotional_trend="negative",
        ))
        assert insights.recommendations == [QUALITY_RECOMMENDATION, SENTIMENT_RECOMMENDATION]
        assert insights.improvements == [TONE_IMPROVEMENT]
        assert insights.patterns == [LONG_CONVERSATION_PATTERN]

    def test_slightly_negative_tone(self):
        insights = derive_insights(summary(average_sentiment=-0.05, emotional_trend="neutral"))
        assert insights.recommendations == []
        assert insights.improvements == [TONE_IMPROVEMENT]

    def test_long_conversation_boundary(self):
        assert derive_insights(summary(total_messages=10)).patterns == []
        assert derive_insights(summary(total_messages=11)).patterns == [LONG_CONVERSATION_PATTERN]

    def test_empty_conversation(self):
        insights = derive_insights(summarize([]))
        assert insights.recommendations == []
        assert insights.improvements == []
        assert insights.patterns == []
        assert insights.alerts == []


class TestConversationAggregator:
    """Test sequential per-message analysis."""

    @pytest.mark.asyncio
    async def test_messages_in_input_order(self):
        analyzer = FakeAnalyzer("sentiment", output=lambda m: {"score": 0.2})
        await analyzer.initialize()
        pipeline = MessagePipeline([analyzer])
        aggregator = ConversationAggregator(pipeline.analyze_message)

        result = await aggregator.aggregate(["one", "two", "three"], {"channel": "web"})

        assert [m.message for m in result.messages] == ["one", "two", "three"]
        assert [call[0] for call in analyzer.calls] == ["one", "two", "three"]
        assert all(call[1] == {"channel": "web"} for call in analyzer.calls)
        assert result.conversation == ["one", "two", "three"]
        assert result.summary.average_sentiment == pytest.approx(0.2)

    @pytest.mark.asyncio
    async def test_long_plain_conversation(self):
        analyzers = [
            FakeAnalyzer("sentiment", output={"score": 0.0}),
            FakeAnalyzer("quality", output={"score": 0.9}),
        ]
        for analyzer in analyzers:
            await analyzer.initialize()
        aggregator = ConversationAggregator(MessagePipeline(analyzers).analyze_message)

        result = await aggregator.aggregate([f"message {i}" for i in range(11)])

        assert result.summary.total_messages == 11
        assert result.insights.recommendations == []
        assert result.insights.improvements == []
        assert result.insights.patterns == [LONG_CONVERSATION_PATTERN]

    @pytest.mark.asyncio
    async def test_failure_aborts_conversation(self):
        analyzer = FakeAnalyzer("sentiment", error=RuntimeError("boom"), fail_on="two")
        await analyzer.initialize()
        aggregator = ConversationAggregator(MessagePipeline([analyzer]).analyze_message)

        with pytest.raises(AnalysisError):
            await aggregator.aggregate(["one", "two", "three"])

        assert [call[0] for call in analyzer.calls] == ["one", "two"]

    @pytest.mark.asyncio
    async def test_empty_conversation(self):
        aggregator = ConversationAggregator(MessagePipeline([]).analyze_message)
        result = await aggregator.aggregate([])
        assert result.messages == []
        assert result.summary.total_messages == 0
        assert result.insights.recommendations == []
