"""Split text into chapters, paragraphs and sentences."""

import math
import re
from dataclasses import dataclass

from ..models.analysis import Chapter
from .numerals import int_to_chinese

SENTENCE_TERMINALS = "。！？!?."

_SENTENCE_PATTERN = re.compile(f"[^{re.escape(SENTENCE_TERMINALS)}]+")
_HAN_PATTERN = re.compile(r"[\u4e00-\u9fff]")

# Tried in order; the first one matching more than one line wins
CHAPTER_PATTERNS: list[re.Pattern] = [
    re.compile(r"^[ \t　]*第[一二三四五六七八九十百千万零〇两\d]+章.*$", re.MULTILINE),
    re.compile(r"^[ \t　]*章节\s*\d+.*$", re.MULTILINE),
    re.compile(r"^[ \t　]*Chapter\s+[IVXLC\d]+.*$", re.MULTILINE | re.IGNORECASE),
    re.compile(r"^[ \t　]*第[一二三四五六七八九十百千万零〇两\d]+节.*$", re.MULTILINE),
    re.compile(r"^[ \t　]*\d+\.\s+.+$", re.MULTILINE),
]

MAX_TITLE_LENGTH = 100


@dataclass
class Sentence:
    """A sentence with its character span in the source text."""

    text: str
    start: int
    end: int
    index: int

    def contains(self, position: int) -> bool:
        return self.start <= position < self.end


def count_words(text: str) -> int:
    """Count words: every Han character plus each non-Han whitespace token."""
    han = len(_HAN_PATTERN.findall(text))
    rest = _HAN_PATTERN.sub(" ", text)
    others = sum(1 for token in rest.split() if re.search(r"\w", token))
    return han + others


def split_sentences(text: str) -> list[Sentence]:
    """
    Split text on sentence-terminal punctuation, keeping offsets.

    Fragments without any word character (a stray closing quote after 。)
    are dropped and do not consume an index.
    """
    sentences: list[Sentence] = []
    for match in _SENTENCE_PATTERN.finditer(text):
        raw = match.group()
        stripped = raw.strip()
        if not stripped or not re.search(r"\w", stripped):
            continue
        start = match.start() + (len(raw) - len(raw.lstrip()))
        sentences.append(
            Sentence(
                text=stripped,
                start=start,
                end=start + len(stripped),
                index=len(sentences),
            )
        )
    return sentences


def split_into_sentences(text: str) -> list[str]:
    """Split text into sentence strings."""
    return [sentence.text for sentence in split_sentences(text)]


def split_into_paragraphs(text: str) -> list[str]:
    """Split text into paragraphs."""
    # Split on double newlines or multiple newlines
    paragraphs = re.split(r"\n\s*\n+", text)

    # Clean up and filter empty
    paragraphs = [p.strip() for p in paragraphs]
    paragraphs = [p for p in paragraphs if p]

    return paragraphs


def split_into_chapters(
    text: str,
    total_words: int | None = None,
    words_per_chapter: int = 3000,
    single_chapter_threshold: int = 5000,
    min_paragraphs: int = 5,
) -> list[Chapter]:
    """
    Split text into chapters.

    Uses the first heading pattern that occurs more than once. Without
    headings, short texts stay a single chapter and long ones are cut into
    roughly equal runs of paragraphs.
    """
    for pattern in CHAPTER_PATTERNS:
        headings = list(pattern.finditer(text))
        if len(headings) > 1:
            chapters = _split_on_headings(text, headings)
            if chapters:
                return chapters

    if total_words is None:
        total_words = count_words(text)

    paragraphs = split_into_paragraphs(text)
    if total_words < single_chapter_threshold or len(paragraphs) < min_paragraphs:
        return [Chapter(title="第一章", content=text.strip(), order=1)]

    estimated = max(1, math.ceil(total_words / words_per_chapter))
    per_chapter = math.ceil(len(paragraphs) / estimated)

    chapters: list[Chapter] = []
    for start in range(0, len(paragraphs), per_chapter):
        order = len(chapters) + 1
        chapters.append(
            Chapter(
                title=f"第{int_to_chinese(order)}章",
                content="\n\n".join(paragraphs[start:start + per_chapter]),
                order=order,
            )
        )
    return chapters


def _split_on_headings(text: str, headings: list[re.Match]) -> list[Chapter]:
    sections: list[tuple[str, str]] = []

    # Substantial text before the first heading becomes a prologue
    preamble = text[: headings[0].start()].strip()
    if len(preamble) > 100:
        sections.append(("序章", preamble))

    for i, match in enumerate(headings):
        end = headings[i + 1].start() if i + 1 < len(headings) else len(text)
        content = text[match.end():end].strip()
        if not content:
            continue  # Skip empty chapters
        title = match.group().strip()
        if len(title) >= MAX_TITLE_LENGTH:
            title = ""
        sections.append((title, content))

    return [
        Chapter(title=title or f"第{int_to_chinese(order)}章", content=content, order=order)
        for order, (title, content) in enumerate(sections, start=1)
    ]


def generate_summary(text: str, max_length: int = 200) -> str:
    """
    Build a short extractive summary.

    Whole sentences are taken from the start of the text for as long as
    they fit. When not even the first sentence fits, the text is truncated
    and marked with an ellipsis.
    """
    clean = re.sub(r"\s+", " ", text).strip()
    if len(clean) <= max_length:
        return clean

    summary = ""
    for sentence in split_into_sentences(clean):
        candidate = f"{summary}{sentence}。"
        if len(candidate) > max_length:
            break
        summary = candidate

    return summary or clean[: max_length - 3] + "..."
