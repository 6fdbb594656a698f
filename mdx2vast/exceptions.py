from typing import Any


class Mdx2VastError(Exception):
    """Base exception for all conversion errors."""

    exit_code: int = 1

    def __init__(self, message: str):
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured log output."""
        return {"detail": str(self)}


class MdxSyntaxError(Mdx2VastError):
    """Raised when the MDX source cannot be tokenized (unclosed tags, unterminated expressions)."""

    def __init__(self, message: str, *, line: int | None = None):
        super().__init__(f"{message} (line {line})" if line is not None else message)
        self.line = line

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self), "line": self.line}


class ParserContractError(Mdx2VastError):
    """Raised when an MDX node reaches a handler without a source position."""

    def __init__(self, node_type: str, *, message: str | None = None):
        super().__init__(message or f"{node_type} node has no source position")
        self.node_type = node_type

    def to_dict(self) -> dict[str, Any]:
        return {"detail": str(self), "node_type": self.node_type}


class InputError(Mdx2VastError):
    """Raised by the CLI for missing, unreadable or empty input."""
