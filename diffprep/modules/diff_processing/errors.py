"""Error types raised by the diff processing engine."""

from __future__ import annotations

from typing import List, Optional


class DiffProcessingError(ValueError):
    """Base class for structural problems with a diff submitted for processing."""


class EmptyInputError(DiffProcessingError):
    """Raised when the input is empty or contains only whitespace."""


class MalformedDiffError(DiffProcessingError):
    """Raised when the input has neither a file header nor a hunk header."""


class DiffValidationError(DiffProcessingError):
    """Raised when the upstream validator rejects a diff.

    The individual validator messages are kept on ``errors``.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        super().__init__(message)
