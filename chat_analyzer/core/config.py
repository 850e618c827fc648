"""
Application and analyzer configuration management using Pydantic.

Two layers live here:

- ``Settings``: process-level settings read from the environment / ``.env``.
- ``AnalyzerConfig``: the per-component analyzer configuration. User supplied
  mappings are deep-merged onto ``DEFAULT_ANALYZER_CONFIG`` and then validated
  into one typed sub-model per component.
"""

import copy
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from chat_analyzer.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings with environment variable support.
    """

    # Basic app configuration
    APP_NAME: str = Field(default="Chat Analyzer", description="Application name")
    API_VERSION: str = Field(default="1.0.0", description="API version")
    ENVIRONMENT: str = Field(default="development", description="Environment (development, staging, production)")
    DEBUG: bool = Field(default=True, description="Debug mode")

    # Server configuration
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080", "http://127.0.0.1:3000"],
        description="Allowed CORS origins"
    )

    # OpenAI Configuration
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="Fallback credential for the OpenAI analyzer")

    # Analyzer pipeline
    ANALYZER_TIMEOUT: Optional[float] = Field(
        default=10.0,
        description="Per-analyzer timeout in seconds; 0 or unset disables the bound"
    )
    ANALYZER_CONFIG_FILE: Optional[str] = Field(
        default=None,
        description="Optional JSON file with analyzer configuration for the HTTP service"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def get_current_timestamp(self) -> str:
        """Get current timestamp in ISO format."""
        return datetime.now(timezone.utc).isoformat()

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    """
    return Settings()


# Analyzer component configuration

class ComponentConfig(BaseModel):
    """Options shared by every component: an ``enabled`` flag plus free-form extras."""

    enabled: bool = Field(default=True, description="Whether the component is activated")

    class Config:
        extra = "allow"


class SentimentConfig(ComponentConfig):
    models: List[str] = Field(default_factory=lambda: ["vader"])
    languages: List[str] = Field(default_factory=lambda: ["en"])
    confidence: float = 0.7


class IntentConfig(ComponentConfig):
    detection: bool = True
    classification: bool = True
    confidence: float = 0.8


class QualityConfig(ComponentConfig):
    scoring: bool = True
    analysis: bool = True
    optimization: bool = True


class ResponsesConfig(ComponentConfig):
    enabled: bool = False
    generation: bool = False
    optimization: bool = True
    templates: bool = True


class OptimizationConfig(ComponentConfig):
    real_time: bool = Field(default=False, description="Activates the real-time stream analyzer")
    recommendations: bool = True
    automation: bool = False
    window_seconds: float = Field(default=60.0, gt=0, description="Sliding window for real-time statistics")
    burst_threshold: int = Field(default=10, ge=1, description="Messages per window that count as a burst")


class MultilangConfig(ComponentConfig):
    enabled: bool = False
    detection: bool = False
    translation: bool = False
    processing: bool = False


class OpenAIConfig(ComponentConfig):
    enabled: bool = False
    api_key: Optional[str] = Field(default=None, description="Credential; the analyzer stays off without it")
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7
    max_tokens: int = 256


class PerformanceConfig(ComponentConfig):
    monitoring: bool = True
    alerts: bool = True
    optimization: bool = True
    slow_threshold_ms: float = Field(default=1000.0, ge=0, description="Durations above this raise a slow-operation alert")
    analyzer_timeout: Optional[float] = Field(
        default=None,
        description="Per-analyzer timeout in seconds, overrides Settings.ANALYZER_TIMEOUT"
    )


class AnalyzerConfig(BaseModel):
    """Effective analyzer configuration, one typed section per component."""

    sentiment: SentimentConfig = Field(default_factory=SentimentConfig)
    intent: IntentConfig = Field(default_factory=IntentConfig)
    quality: QualityConfig = Field(default_factory=QualityConfig)
    responses: ResponsesConfig = Field(default_factory=ResponsesConfig)
    optimization: OptimizationConfig = Field(default_factory=OptimizationConfig)
    multilang: MultilangConfig = Field(default_factory=MultilangConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)

    class Config:
        extra = "allow"

    @classmethod
    def from_user(cls, user_config: Optional[Mapping[str, Any]] = None) -> "AnalyzerConfig":
        """
        Merge user configuration onto the defaults and validate the result.

        Args:
            user_config: Partial configuration mapping; ``None`` means defaults

        Returns:
            Validated effective configuration

        Raises:
            ConfigurationError: If the input is not a mapping or fails validation
        """
        if user_config is None:
            user_config = {}
        if not isinstance(user_config, Mapping):
            raise ConfigurationError(
                "Analyzer configuration must be a mapping",
                error_code="INVALID_CONFIG_TYPE",
                details={"type": type(user_config).__name__}
            )

        merged = deep_merge(DEFAULT_ANALYZER_CONFIG, normalize_config_keys(user_config))
        try:
            return cls.model_validate(merged)
        except PydanticValidationError as e:
            raise ConfigurationError(
                "Invalid analyzer configuration",
                error_code="INVALID_CONFIG",
                details={"errors": e.errors(include_url=False)}
            ) from e


DEFAULT_ANALYZER_CONFIG: Dict[str, Any] = AnalyzerConfig().model_dump()

# camelCase spellings accepted from callers, mapped onto field names
SECTION_ALIASES = {"multilingual": "multilang"}
OPTION_ALIASES = {
    "optimization": {"realTime": "real_time", "windowSeconds": "window_seconds", "burstThreshold": "burst_threshold"},
    "openai": {"apiKey": "api_key", "maxTokens": "max_tokens"},
    "performance": {"slowThresholdMs": "slow_threshold_ms", "analyzerTimeout": "analyzer_timeout"},
}


def normalize_config_keys(user_config: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename alias keys to their canonical names, leaving everything else untouched."""
    normalized: Dict[str, Any] = {}
    for key, value in user_config.items():
        section = SECTION_ALIASES.get(key, key)
        aliases = OPTION_ALIASES.get(section)
        if aliases and isinstance(value, Mapping):
            value = {aliases.get(k, k): v for k, v in value.items()}
        normalized[section] = value
    return normalized


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge ``source`` onto ``target`` without mutating either.

    Nested mappings present on both sides are merged; any other source value
    (lists, scalars, None) replaces the target value wholesale. Keys only in
    ``source`` are kept.
    """
    result = copy.deepcopy(dict(target))
    for key, value in source.items():
        current = result.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            result[key] = deep_merge(current, value)
        elif isinstance(value, Mapping):
            result[key] = deep_merge({}, value)
        else:
            result[key] = copy.deepcopy(value)
    return result
