"""
Heuristic message quality scoring.
"""

import re
from typing import Any, Dict, List, Optional

from chat_analyzer.components.base import Analyzer
from chat_analyzer.core.config import QualityConfig

POLITE_WORDS = ["please", "thank you", "thanks", "appreciate", "sorry", "excuse me"]
IMPOLITE_WORDS = ["damn", "stupid", "idiot", "hate", "angry"]
GREETING_RE = re.compile(r"^(hi|hello|hey|good morning|good afternoon)", re.IGNORECASE)
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

FACTOR_ADVICE = {
    "length": "Consider providing more detail in your message",
    "clarity": "Try to use shorter, clearer sentences",
    "politeness": "Consider using more polite language",
    "completeness": "Provide more context or background information",
    "relevance": "Stay more focused on the topic",
}


class QualityScorer(Analyzer):
    """
    Scores a message on five factors in [0, 1] and averages them.

    Factors: length, clarity (words per sentence), politeness, completeness
    and relevance to ``context["topic"]``. Every factor below 0.5 adds a
    recommendation.
    """

    name = "quality"
    result_key = "quality"

    def __init__(self, config: Optional[QualityConfig] = None):
        super().__init__(config or QualityConfig())

    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        factors = {
            "length": score_length(message),
            "clarity": score_clarity(message),
            "politeness": score_politeness(message),
            "completeness": score_completeness(message),
            "relevance": score_relevance(message, context.get("topic")),
        }
        score = round(sum(factors.values()) / len(factors), 2)

        self.logger.debug("Quality scoring completed", extra={"score": score})
        return {
            "message": message,
            "score": score,
            "factors": factors,
            "recommendations": recommendations_for(factors),
        }


def score_length(message: str) -> float:
    length = len(message)
    if length < 10:
        return 0.3
    if length < 50:
        return 0.6
    if length < 200:
        return 1.0
    if length < 500:
        return 0.8
    return 0.5


def score_clarity(message: str) -> float:
    sentences = [s for s in SENTENCE_SPLIT_RE.split(message) if s.strip()]
    if not sentences:
        return 0.3
    avg_words = len(message.split()) / len(sentences)
    if avg_words < 5:
        return 0.4
    if avg_words < 15:
        return 1.0
    if avg_words < 25:
        return 0.7
    return 0.3


def score_politeness(message: str) -> float:
    lower = message.lower()
    score = 0.5
    score += 0.1 * sum(1 for word in POLITE_WORDS if word in lower)
    score -= 0.2 * sum(1 for word in IMPOLITE_WORDS if word in lower)
    return max(0.0, min(1.0, score))


def score_completeness(message: str) -> float:
    score = 0.0
    if GREETING_RE.match(message):
        score += 0.3
    if len(message.split()) > 5:
        score += 0.5
    if "?" in message:
        score += 0.2
    return min(1.0, score)


def score_relevance(message: str, topic: Optional[str]) -> float:
    topic_keywords = str(topic or "").lower().split()
    if not topic_keywords:
        return 0.7
    message_words = message.lower().split()
    matches = [kw for kw in topic_keywords if any(kw in word for word in message_words)]
    return min(1.0, len(matches) / len(topic_keywords) + 0.3)


def recommendations_for(factors: Dict[str, float]) -> List[str]:
    return [advice for factor, advice in FACTOR_ADVICE.items() if factors.get(factor, 1.0) < 0.5]
