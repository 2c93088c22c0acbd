"""Domain errors (typed) for the playground pipeline.

Every error carries a ``kind`` tag so callers can tell caller mistakes
("config") apart from dependency failures ("service") without isinstance
chains. ``str(err)`` is the user-visible message.
"""


class DomainError(Exception):
    """Base class for domain-specific errors."""

    kind: str = "internal"


class InvalidConfig(DomainError):
    """Bad chunk size/overlap, K, temperature or top-p."""

    kind = "config"


class EmbeddingServiceError(DomainError):
    """Embedding backend failed or returned a malformed response."""

    kind = "service"


class CompletionServiceError(DomainError):
    """Completion backend failed or is misconfigured."""

    kind = "service"


class NodeIndexError(DomainError):
    """Index invariant violated (e.g. chunk/embedding count mismatch)."""

    kind = "internal"


class RetrievalError(DomainError):
    """Empty index or query vector dimension mismatch."""

    kind = "retrieval"


class BuildInProgressError(DomainError):
    """A build for the same document/config is already running."""

    kind = "conflict"


class ParseError(DomainError):
    """One paragraph of the model output does not follow the answer grammar."""

    kind = "parse"

    def __init__(self, paragraph: int, reason: str, text: str = "") -> None:
        super().__init__(paragraph, reason)
        self.paragraph = paragraph
        self.reason = reason
        self.text = text

    def __str__(self) -> str:
        return f"paragraph {self.paragraph}: {self.reason}"
