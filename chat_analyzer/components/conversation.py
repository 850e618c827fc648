"""
Structural message statistics, always part of the active set.
"""

import re
from typing import Any, Dict

from chat_analyzer.components.base import Analyzer


class ConversationAnalyzer(Analyzer):
    name = "conversation"
    result_key = "conversation"

    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "message_length": len(message),
            "word_count": len(message.split()),
            "sentence_count": len([s for s in re.split(r"[.!?]+", message) if s.strip()]),
            "has_question": "?" in message,
            "has_exclamation": "!" in message,
        }
