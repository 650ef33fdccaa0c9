"""Novel Graph Analyzer - heuristic knowledge graphs from Chinese fiction."""

__version__ = "0.1.0"
