"""
Tests for component activation and active set construction.
"""

import pytest

from chat_analyzer.components import ConversationAnalyzer, OpenAIAnalyzer, PerformanceMonitor, SentimentAnalyzer
from chat_analyzer.core.config import AnalyzerConfig, Settings
from chat_analyzer.core.exceptions import ConfigurationError, InitializationError
from chat_analyzer.features.analysis.registry import ComponentKind, ComponentRegistry

from conftest import FakeAnalyzer


class TestActivation:
    """Test which component kinds are active for a configuration."""

    def test_default_active_kinds(self, settings):
        registry = ComponentRegistry(settings=settings)
        assert registry.active_kinds(AnalyzerConfig.from_user({})) == [
            ComponentKind.SENTIMENT,
            ComponentKind.INTENT,
            ComponentKind.QUALITY,
            ComponentKind.CONVERSATION,
            ComponentKind.PERFORMANCE,
        ]

    def test_conversation_always_active(self, settings):
        registry = ComponentRegistry(settings=settings)
        config = AnalyzerConfig.from_user({
            "sentiment": {"enabled": False},
            "intent": {"enabled": False},
            "quality": {"enabled": False},
            "performance": {"enabled": False},
        })
        assert registry.active_kinds(config) == [ComponentKind.CONVERSATION]

    def test_openai_needs_credential(self, settings):
        registry = ComponentRegistry(settings=settings)
        config = AnalyzerConfig.from_user({"openai": {"enabled": True}})
        assert ComponentKind.OPENAI not in registry.active_kinds(config)

        config = AnalyzerConfig.from_user({"openai": {"enabled": True, "api_key": "sk-test"}})
        assert ComponentKind.OPENAI in registry.active_kinds(config)

    def test_openai_credential_from_settings(self):
        registry = ComponentRegistry(settings=Settings(_env_file=None, OPENAI_API_KEY="sk-env"))
        config = AnalyzerConfig.from_user({"openai": {"enabled": True}})
        assert ComponentKind.OPENAI in registry.active_kinds(config)

    def test_openai_key_without_enabled(self, settings):
        registry = ComponentRegistry(settings=settings)
        config = AnalyzerConfig.from_user({"openai": {"api_key": "sk-test"}})
        assert ComponentKind.OPENAI not in registry.active_kinds(config)

    def test_realtime_from_optimization(self, settings):
        registry = ComponentRegistry(settings=settings)
        config = AnalyzerConfig.from_user({"optimization": {"realTime": True}})
        assert ComponentKind.REALTIME in registry.active_kinds(config)

    def test_supported_features(self, settings):
        registry = ComponentRegistry(settings=settings)
        features = registry.supported_features(AnalyzerConfig.from_user({"openai": {"enabled": True}}))
        assert features == {
            "sentiment": True,
            "intent": True,
            "responses": False,
            "quality": True,
            "optimization": True,
            "multilang": False,
            "openai": True,
            "realtime": False,
            "performance": True,
        }


class TestBuildActiveSet:
    """Test construction and initialization of the active set."""

    @pytest.mark.asyncio
    async def test_builds_in_declaration_order(self, settings):
        registry = ComponentRegistry(settings=settings)
        components = await registry.build_active_set(AnalyzerConfig.from_user({}))

        assert [c.name for c in components] == ["sentiment", "intent", "quality", "conversation", "performance"]
        assert all(c.initialized for c in components)
        assert isinstance(components[0], SentimentAnalyzer)
        assert isinstance(components[3], ConversationAnalyzer)
        assert isinstance(components[-1], PerformanceMonitor)

    @pytest.mark.asyncio
    async def test_openai_gets_settings_credential(self):
        registry = ComponentRegistry(settings=Settings(_env_file=None, OPENAI_API_KEY="sk-env"))
        config = AnalyzerConfig.from_user({
            "openai": {"enabled": True},
            "sentiment": {"enabled": False},
            "intent": {"enabled": False},
            "quality": {"enabled": False},
        })
        components = await registry.build_active_set(config)
        openai = next(c for c in components if isinstance(c, OpenAIAnalyzer))
        assert openai.config.api_key == "sk-env"
        for component in components:
            await component.shutdown()

    @pytest.mark.asyncio
    async def test_override_keeps_activation(self, make_registry):
        fake = FakeAnalyzer("responses", result_key="response")
        registry = make_registry(responses=fake)

        components = await registry.build_active_set(AnalyzerConfig.from_user({}))
        assert fake not in components
        assert fake.setup_calls == 0

        components = await registry.build_active_set(AnalyzerConfig.from_user({"responses": {"enabled": True}}))
        assert fake in components

    @pytest.mark.asyncio
    async def test_failures_collected_and_rolled_back(self, make_registry):
        sentiment = FakeAnalyzer("sentiment")
        intent = FakeAnalyzer("intent", init_error=RuntimeError("model missing"))
        quality = FakeAnalyzer("quality")
        conversation = FakeAnalyzer("conversation", init_error=ValueError("bad"))
        registry = make_registry(
            sentiment=sentiment,
            intent=intent,
            quality=quality,
            conversation=conversation,
        )

        with pytest.raises(InitializationError) as exc_info:
            await registry.build_active_set(AnalyzerConfig.from_user({"performance": {"enabled": False}}))

        assert set(exc_info.value.failures) == {"intent", "conversation"}
        assert isinstance(exc_info.value.failures["intent"], RuntimeError)
        # every kind was attempted, the ones that came up were torn down again
        assert quality.setup_calls == 1
        assert sentiment.teardown_calls == 1
        assert quality.teardown_calls == 1
        assert intent.teardown_calls == 0

    @pytest.mark.asyncio
    async def test_factory_error_collected(self, settings):
        def broken(config, s):
            raise ConfigurationError("no model")

        registry = ComponentRegistry(settings=settings, overrides={ComponentKind.QUALITY: broken})
        with pytest.raises(InitializationError) as exc_info:
            await registry.build_active_set(AnalyzerConfig.from_user({}))
        assert list(exc_info.value.failures) == ["quality"]
