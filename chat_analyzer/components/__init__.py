"""
Pluggable pipeline components.
"""

from chat_analyzer.components.base import Component, Analyzer
from chat_analyzer.components.sentiment import SentimentAnalyzer
from chat_analyzer.components.intent import IntentDetector
from chat_analyzer.components.quality import QualityScorer
from chat_analyzer.components.responses import ResponseGenerator
from chat_analyzer.components.conversation import ConversationAnalyzer
from chat_analyzer.components.openai_analyzer import OpenAIAnalyzer
from chat_analyzer.components.realtime import RealTimeAnalyzer
from chat_analyzer.components.performance import PerformanceMonitor

__all__ = [
    "Component",
    "Analyzer",
    "SentimentAnalyzer",
    "IntentDetector",
    "QualityScorer",
    "ResponseGenerator",
    "ConversationAnalyzer",
    "OpenAIAnalyzer",
    "RealTimeAnalyzer",
    "PerformanceMonitor",
]
