"""
Template based response suggestions.
"""

import random
from typing import Any, Dict, List, Optional

from chat_analyzer.components.base import Analyzer
from chat_analyzer.core.config import ResponsesConfig

RESPONSE_TEMPLATES: Dict[str, List[str]] = {
    "greeting": [
        "Hello! How can I help you today?",
        "Hi there! What can I assist you with?",
        "Good day! How may I help you?",
    ],
    "question": [
        "That's a great question. Let me help you with that.",
        "I'd be happy to help you with that question.",
        "Let me provide you with some information about that.",
    ],
    "complaint": [
        "I'm sorry to hear about this issue. Let me help you resolve it.",
        "I understand your frustration. Let's work together to fix this.",
        "Thank you for bringing this to our attention. Let me assist you.",
    ],
    "request": [
        "I'd be happy to help you with that request.",
        "Of course! Let me assist you with that.",
        "I'll do my best to help you with that.",
    ],
    "goodbye": [
        "Thank you for chatting with us today!",
        "Have a great day! Feel free to reach out anytime.",
        "Goodbye! We're here if you need anything else.",
    ],
    "thanks": [
        "You're very welcome!",
        "Happy to help!",
        "My pleasure! Is there anything else I can assist you with?",
    ],
}
FALLBACK_TEMPLATE = "question"

# checked in order, first hit wins
TEMPLATE_KEYWORDS = [
    ("greeting", ("hello", "hi")),
    ("thanks", ("thank",)),
    ("goodbye", ("bye", "goodbye")),
    ("complaint", ("problem", "issue")),
    ("request", ("please", "can you")),
]


class ResponseGenerator(Analyzer):
    """Suggests a reply picked from the template set matching the message intent."""

    name = "responses"
    result_key = "response"

    def __init__(self, config: Optional[ResponsesConfig] = None, rng: Optional[random.Random] = None):
        super().__init__(config or ResponsesConfig())
        self.templates = RESPONSE_TEMPLATES
        self._rng = rng or random.Random()

    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        intent = context.get("intent") or detect_template(message)
        if intent not in self.templates:
            intent = FALLBACK_TEMPLATE
        candidates = self.templates[intent]

        selected = self._rng.choice(candidates)
        alternatives = [t for t in candidates if t != selected][:2]

        self.logger.debug("Response generation completed", extra={"template": intent})
        return {
            "message": message,
            "response": selected,
            "confidence": 0.8,
            "template": intent,
            "alternatives": alternatives,
        }


def detect_template(message: str) -> str:
    lower = message.lower()
    for template, keywords in TEMPLATE_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return template
    return FALLBACK_TEMPLATE
