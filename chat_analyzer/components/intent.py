"""
Keyword based intent detection.
"""

import re
from typing import Any, Dict, List, Optional

from chat_analyzer.components.base import Analyzer
from chat_analyzer.core.config import IntentConfig

INTENT_PATTERNS: Dict[str, List[str]] = {
    "greeting": ["hello", "hi", "hey", "good morning", "good afternoon", "good evening"],
    "question": ["what", "how", "when", "where", "why", "who", "which", "?"],
    "complaint": ["problem", "issue", "error", "bug", "broken", "not working", "complaint"],
    "request": ["please", "can you", "could you", "would you", "help", "assist"],
    "goodbye": ["bye", "goodbye", "see you", "farewell", "take care"],
    "thanks": ["thank you", "thanks", "appreciate", "grateful"],
    "purchase": ["buy", "purchase", "order", "price", "cost", "payment"],
    "support": ["help", "support", "assistance", "troubleshoot", "fix"],
}
UNKNOWN_INTENT = "unknown"


class IntentDetector(Analyzer):
    """
    Scores every known intent by keyword hits.

    A substring hit counts 1 and an exact word hit another 0.5. The best
    scoring intent wins; ties keep the declaration order of ``INTENT_PATTERNS``.
    A message without any hit is ``"unknown"``.
    Confidence is the winning score divided by 3, capped at 1.
    """

    name = "intent"
    result_key = "intent"

    def __init__(self, config: Optional[IntentConfig] = None, patterns: Optional[Dict[str, List[str]]] = None):
        super().__init__(config or IntentConfig())
        self.patterns = patterns or INTENT_PATTERNS

    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        classification = self.classify(message)
        self.logger.debug(
            "Intent detection completed",
            extra={"intent": classification["intent"], "confidence": classification["confidence"]}
        )
        return {"text": message, **classification}

    def classify(self, text: str) -> Dict[str, Any]:
        lower_text = text.lower()
        words = re.split(r"\s+", lower_text)

        scores: Dict[str, float] = {}
        keywords: List[str] = []
        for intent, patterns in self.patterns.items():
            score = 0.0
            for pattern in patterns:
                if pattern in lower_text:
                    score += 1
                    keywords.append(pattern)
            for word in words:
                if word in patterns:
                    score += 0.5
                    keywords.append(word)
            scores[intent] = score

        # sorted() is stable, so equal scores keep pattern order
        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        primary, primary_score = ranked[0]
        if primary_score == 0:
            primary = UNKNOWN_INTENT

        return {
            "intent": primary,
            "confidence": min(primary_score / 3, 1.0),
            "alternatives": [{"intent": intent, "score": score} for intent, score in ranked[1:4]],
            "keywords": list(dict.fromkeys(keywords)),
        }
