"""
Features module initialization.
"""

from chat_analyzer.features.analysis import router as analysis_router

__all__ = [
    "analysis_router",
]
