"""Document errors and render warnings"""

from typing import Optional


class PostpressError(Exception):
    """Base class for postpress errors."""


class DocumentError(PostpressError, ValueError):
    """A single document cannot be processed; carries its identifier."""

    def __init__(self, message: str, doc_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.doc_id = doc_id

    def __str__(self) -> str:
        if self.doc_id:
            return f"{self.doc_id}: {self.message}"
        return self.message


class MalformedFrontMatter(DocumentError):
    """Front-matter block is unterminated, not valid YAML, or not a mapping."""


class InvalidDocument(DocumentError):
    """Front-matter parsed, but a required field (title, date) is missing or unusable."""


class RenderWarning(UserWarning):
    """A rendering degradation: output is produced on a best-effort basis."""

    kind = "render"

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


class UnterminatedCodeFence(RenderWarning):
    kind = "unterminated-code-fence"


class UnterminatedRawBlock(RenderWarning):
    kind = "unterminated-raw-block"
