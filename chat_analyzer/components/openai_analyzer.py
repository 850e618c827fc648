"""
OpenAI backed message analysis.

Only active when the ``openai`` section is enabled and carries a credential.
"""

import json
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from chat_analyzer.components.base import Analyzer
from chat_analyzer.core.config import OpenAIConfig
from chat_analyzer.core.dependencies import create_openai_client
from chat_analyzer.core.exceptions import ConfigurationError, OpenAIError
from chat_analyzer.shared.utils import retry_with_backoff, validate_openai_response

SYSTEM_PROMPT = """You are an expert conversation analyst. Analyze the chat message you are given.
Return only a JSON object with the structure:
{"summary": "one sentence", "sentiment": "positive|neutral|negative", "intent": "short label", "confidence": number between 0 and 1}"""

VALID_SENTIMENTS = ("positive", "neutral", "negative")


class OpenAIAnalyzer(Analyzer):
    """Asks a chat model for a short structured judgment about each message."""

    name = "openai"
    result_key = "openai"

    def __init__(self, config: Optional[OpenAIConfig] = None, client: Optional[AsyncOpenAI] = None):
        super().__init__(config or OpenAIConfig())
        self.client = client
        self._owns_client = client is None

    async def setup(self) -> None:
        if self.client is not None:
            return
        api_key = self.config.api_key
        if not api_key:
            raise ConfigurationError(
                "OpenAI analyzer enabled without an API key",
                error_code="OPENAI_API_KEY_MISSING"
            )
        self.client = create_openai_client(api_key)

    async def teardown(self) -> None:
        if self._owns_client and self.client is not None:
            await self.client.close()
            self.client = None

    async def _analyze(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        analysis = await self._complete(message, context)
        return {
            "message": message,
            "model": self.config.model,
            "summary": analysis.get("summary", ""),
            "sentiment": analysis["sentiment"],
            "intent": analysis.get("intent"),
            "confidence": analysis["confidence"],
        }

    @retry_with_backoff(max_retries=2, backoff_factor=0.5, exceptions=(OpenAIError,))
    async def _complete(self, message: str, context: Dict[str, Any]) -> Dict[str, Any]:
        user_content = f"Message: '{message}'"
        if context:
            user_content += f"\nContext: {json.dumps(context, default=str)}"

        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_content},
                ]
            )
        except Exception as e:
            self.logger.error(f"OpenAI request failed: {e}")
            raise OpenAIError(f"OpenAI request failed: {str(e)}") from e

        if not validate_openai_response(response):
            raise OpenAIError("Empty response from OpenAI")

        try:
            result = json.loads(response.choices[0].message.content)
        except json.JSONDecodeError as e:
            self.logger.error(f"Failed to parse OpenAI response: {e}")
            raise OpenAIError("Invalid response format from OpenAI analysis") from e

        sentiment = str(result.get("sentiment", "")).lower()
        if sentiment not in VALID_SENTIMENTS:
            raise OpenAIError(f"Invalid sentiment: {result.get('sentiment')}")
        try:
            confidence = float(result.get("confidence", 0.0))
        except (TypeError, ValueError) as e:
            raise OpenAIError(f"Invalid confidence: {result.get('confidence')}") from e

        result["sentiment"] = sentiment
        result["confidence"] = max(0.0, min(1.0, confidence))
        return result
