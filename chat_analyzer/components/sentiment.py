"""
VADER based sentiment analyzer.
"""

from typing import Any, Dict, Optional

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer as VaderAnalyzer

from chat_analyzer.components.base import Analyzer
from chat_analyzer.core.config import SentimentConfig

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05


def sentiment_label(score: float) -> str:
    """Map a compound score onto positive / negative / neutral."""
    if score >= POSITIVE_THRESHOLD:
        return "positive"
    if score <= NEGATIVE_THRESHOLD:
        return "negative"
    return "neutral"


class SentimentAnalyzer(Analyzer):
    """Scores messages with the VADER lexicon; ``score`` is the compound value in [-1, 1]."""

    name = "sentiment"
    result_key = "sentiment"

    def __init__(self, config: Optional[SentimentConfig] = None):
        super().__init__(config or SentimentConfig())
        self._vader: Optional[VaderAnalyzer] = None

    async def setup(self) -> None:
        # lexicon loading is the only expensive step
        self._vader = VaderAnalyzer()

    async def teardown(self) -> None:
        self._vader = None

    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        scores = self._vader.polarity_scores(message)
        compound = scores["compound"]

        result = {
            "text": message,
            "score": compound,
            "positive": scores["pos"],
            "negative": scores["neg"],
            "neutral": scores["neu"],
            "confidence": abs(compound),
            "label": sentiment_label(compound),
        }
        self.logger.debug(
            "Sentiment analysis completed",
            extra={"score": result["score"], "label": result["label"]}
        )
        return result
