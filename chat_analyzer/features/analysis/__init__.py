"""
Chat analysis feature module.
"""

from chat_analyzer.features.analysis.aggregator import ConversationAggregator, derive_insights, summarize
from chat_analyzer.features.analysis.pipeline import MessagePipeline
from chat_analyzer.features.analysis.registry import ComponentKind, ComponentRegistry
from chat_analyzer.features.analysis.services import ChatAnalyzer, LifecycleState
from chat_analyzer.features.analysis.routes import router

__all__ = [
    "router",
    "ChatAnalyzer",
    "LifecycleState",
    "ComponentKind",
    "ComponentRegistry",
    "MessagePipeline",
    "ConversationAggregator",
    "summarize",
    "derive_insights",
]
