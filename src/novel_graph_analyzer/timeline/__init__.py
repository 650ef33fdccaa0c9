"""Time expressions, events and causal event chains."""

from .causality import ChainAnalysis, EventChainAnalyzer, assess_impact
from .events import EventExtractor, sort_timeline
from .temporal import TimeExpressionExtractor

__all__ = [
    "ChainAnalysis",
    "EventChainAnalyzer",
    "EventExtractor",
    "TimeExpressionExtractor",
    "assess_impact",
    "sort_timeline",
]
