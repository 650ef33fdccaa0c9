"""Error hierarchy for the analysis pipeline.

Every error carries an HTTP-mappable ``status_code`` so a surrounding
service layer can turn it into a response without knowing which stage
raised it.
"""

from __future__ import annotations


class NovelAnalysisError(Exception):
    """Base class for all analysis errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.cause = cause


class ContentError(NovelAnalysisError):
    """The input document is empty or cannot be analyzed."""

    status_code = 400


class UnsupportedFormatError(NovelAnalysisError):
    """The ingestion layer does not know how to decode a file type."""

    status_code = 400

    def __init__(self, file_type: str) -> None:
        super().__init__(f"不支持的文件类型: {file_type}")
        self.file_type = file_type


class FileTooLargeError(NovelAnalysisError):
    """The file exceeds the configured ingestion ceiling."""

    status_code = 413

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"文件过大: {size} 字节 (上限 {limit} 字节)")
        self.size = size
        self.limit = limit


class InternalAnalysisError(NovelAnalysisError):
    """Unexpected fault inside the pipeline."""

    status_code = 500

    def __init__(self, cause: Exception | None = None) -> None:
        super().__init__("内容分析失败", cause=cause)

    @classmethod
    def wrap(cls, err: Exception) -> NovelAnalysisError:
        if isinstance(err, NovelAnalysisError):
            return err
        return cls(err)
