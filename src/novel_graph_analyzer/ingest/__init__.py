"""Text ingestion and segmentation."""

from novel_graph_analyzer.ingest.loader import decode
from novel_graph_analyzer.ingest.splitter import (
    count_words,
    generate_summary,
    split_into_chapters,
    split_sentences,
)

__all__ = ["count_words", "decode", "generate_summary", "split_into_chapters", "split_sentences"]
