"""Decode uploaded documents into plain text."""

import json
import logging
import mimetypes
import re
import zipfile
from pathlib import Path

from bs4 import BeautifulSoup

from ..config import get_settings
from ..errors import ContentError, FileTooLargeError, UnsupportedFormatError

logger = logging.getLogger(__name__)

# Used when the declared type is missing or generic
EXTENSION_MIME_TYPES: dict[str, str] = {
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".html": "text/html",
    ".htm": "text/html",
    ".json": "application/json",
    ".epub": "application/epub+zip",
    ".rtf": "application/rtf",
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

GENERIC_MIME_TYPES = {"", "application/octet-stream"}

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME_TYPE = "application/msword"

# Markdown syntax stripped before analysis, applied in order
MARKDOWN_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),  # headings
    (re.compile(r"```.*?```", re.DOTALL), ""),  # fenced code
    (re.compile(r"`([^`]+)`"), r"\1"),  # inline code
    (re.compile(r"!\[([^\]]*)\]\([^)]*\)"), r"\1"),  # images
    (re.compile(r"\[([^\]]+)\]\([^)]*\)"), r"\1"),  # links
    (re.compile(r"(\*\*|__)(.+?)\1"), r"\2"),  # bold
    (re.compile(r"(\*|_)(.+?)\1"), r"\2"),  # italic
    (re.compile(r"^\s*>\s?", re.MULTILINE), ""),  # quotes
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),  # bullets
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),  # numbered lists
]


def decode(path: Path, mime_type: str | None = None, max_size: int | None = None) -> str:
    """
    Load a document and return plain text.

    Supports:
    - plain text (utf-8, utf-8-sig, gb18030, latin-1)
    - Markdown (syntax stripped)
    - HTML (tags stripped)
    - JSON (``content``/``text`` fields or ``chapters``)
    - EPUB
    - Word (.docx; a legacy binary .doc fails with a conversion hint)

    Args:
        path: File to read
        mime_type: Declared type; guessed from the extension when absent
        max_size: Size ceiling in bytes (defaults to settings)

    Returns:
        The decoded text
    """
    path = Path(path)
    limit = max_size if max_size is not None else get_settings().max_file_size
    size = path.stat().st_size
    if size > limit:
        raise FileTooLargeError(size, limit)

    mime = resolve_mime_type(path, mime_type)
    logger.debug("Decoding %s as %s", path, mime)

    if mime == "text/plain":
        text = load_txt(path)
    elif mime == "text/markdown":
        text = strip_markdown(load_txt(path))
    elif mime == "text/html":
        text = html_to_text(load_txt(path))
    elif mime == "application/json":
        text = json_to_text(load_txt(path))
    elif mime == "application/epub+zip":
        text = load_epub(path)
    elif mime in (DOCX_MIME_TYPE, DOC_MIME_TYPE):
        text = load_docx(path, legacy=mime == DOC_MIME_TYPE)
    else:
        raise UnsupportedFormatError(mime)

    if not text.strip():
        raise ContentError("文件内容为空")
    return text


def resolve_mime_type(path: Path, mime_type: str | None) -> str:
    """Pick the effective mime type for a file."""
    declared = (mime_type or "").split(";")[0].strip().lower()
    if declared not in GENERIC_MIME_TYPES:
        return declared

    suffix = path.suffix.lower()
    if suffix in EXTENSION_MIME_TYPES:
        return EXTENSION_MIME_TYPES[suffix]

    guessed, _ = mimetypes.guess_type(path.name)
    if guessed is None:
        raise UnsupportedFormatError(suffix or "unknown")
    return guessed


def load_txt(path: Path) -> str:
    """Load a plain text file."""
    # Try common encodings
    for encoding in ["utf-8", "utf-8-sig", "gb18030"]:
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue

    # latin-1 maps every byte
    return path.read_text(encoding="latin-1")


def strip_markdown(text: str) -> str:
    """Remove Markdown syntax, keeping the readable text."""
    for pattern, replacement in MARKDOWN_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def html_to_text(html: str | bytes) -> str:
    """Extract readable text from an HTML document."""
    soup = BeautifulSoup(html, "html.parser")

    # Remove script and style elements
    for element in soup(["script", "style"]):
        element.decompose()

    text = soup.get_text(separator="\n")

    # Clean up whitespace
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def json_to_text(raw: str) -> str:
    """Pull manuscript text out of a JSON export."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ContentError(f"JSON 解析失败: {e}") from e

    if isinstance(data, dict):
        for key in ("content", "text"):
            if isinstance(data.get(key), str):
                return data[key]

        chapters = data.get("chapters")
        if isinstance(chapters, list):
            parts = []
            for chapter in chapters:
                if isinstance(chapter, dict):
                    body = chapter.get("content") or chapter.get("text")
                    if isinstance(body, str):
                        parts.append(body)
            if parts:
                return "\n\n".join(parts)

    return json.dumps(data, ensure_ascii=False, indent=2)


def load_epub(path: Path) -> str:
    """Load an EPUB file and extract text."""
    import ebooklib
    from ebooklib import epub

    book = epub.read_epub(str(path))
    texts: list[str] = []

    for item in book.get_items():
        if item.get_type() == ebooklib.ITEM_DOCUMENT:
            text = html_to_text(item.get_content())
            if text:
                texts.append(text)

    return "\n\n".join(texts)


def load_docx(path: Path, legacy: bool = False) -> str:
    """Load a Word document and extract paragraph text."""
    import docx
    from docx.opc.exceptions import PackageNotFoundError

    try:
        document = docx.Document(str(path))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        if legacy:
            raise ContentError("旧版Word文档(.doc)解析失败，建议转换为.docx格式后重试") from e
        raise ContentError(f"解析Word文档失败: {e}") from e

    text = "\n".join(paragraph.text for paragraph in document.paragraphs)
    if not text.strip():
        raise ContentError("Word文档内容为空或无法读取")
    return text
