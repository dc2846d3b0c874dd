"""Git diff validation module.

Checks a submitted diff before it reaches the processing engine.

Rejected input:
- Empty or whitespace-only text
- Text larger than the configured cap (10 MiB by default)
- Text with neither a ``diff --git`` header nor an ``@@`` hunk header
- Binary file diffs, unless explicitly allowed
- Script injection patterns (``<script>``, ``javascript:``, ``eval(`` ...)
"""

import re
from dataclasses import dataclass, field
from typing import List

from loguru import logger

from .diff_processing.errors import DiffValidationError
from .diff_processing.splitter import FILE_BOUNDARY, HUNK_HEADER

DEFAULT_MAX_SIZE = 10 * 1024 * 1024

BINARY_FILES = re.compile(r"^Binary files? .+ differ$", re.MULTILINE)

SUSPICIOUS_PATTERNS = [
    (re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE), "script_tag"),
    (re.compile(r"javascript:", re.IGNORECASE), "javascript_url"),
    (re.compile(r"eval\s*\(", re.IGNORECASE), "eval_call"),
    (re.compile(r"document\.write", re.IGNORECASE), "document_write"),
    (re.compile(r"window\.location", re.IGNORECASE), "window_location"),
    (re.compile(r"\.innerHTML", re.IGNORECASE), "inner_html"),
]

# Inline event handler attributes inside a tag. Common in JSX, so only
# flagged outside React diffs.
EVENT_HANDLER = re.compile(r"<[^>\n]*\bon[a-z]+\s*=", re.IGNORECASE)

REACT_FILE = re.compile(r"\.(jsx?|tsx?)$", re.MULTILINE)
REACT_MARKERS = ("className=", "export default function", "React", "useState", "useEffect")


@dataclass
class ValidationResult:
    """Outcome of validating a diff.

    Attributes:
        is_valid: True if no check failed
        errors: Human-readable reasons for rejection
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def _looks_like_react(text: str) -> bool:
    return bool(REACT_FILE.search(text)) or any(marker in text for marker in REACT_MARKERS)


def find_suspicious_content(text: str) -> List[str]:
    """Return the names of suspicious patterns found in ``text``."""
    found = [name for pattern, name in SUSPICIOUS_PATTERNS if pattern.search(text)]
    if not _looks_like_react(text) and EVENT_HANDLER.search(text):
        found.append("event_handler")
    return found


def validate_git_diff(
    text: str,
    max_size: int = DEFAULT_MAX_SIZE,
    allow_binary_files: bool = False,
) -> ValidationResult:
    """Validate ``text`` as a git diff.

    Size is measured in UTF-8 bytes.
    """
    errors: List[str] = []

    if not text or not isinstance(text, str):
        errors.append("Input must be a non-empty string")
        return ValidationResult(is_valid=False, errors=errors)

    if max_size and len(text.encode("utf-8")) > max_size:
        errors.append(f"Input size exceeds maximum allowed size of {max_size} bytes")
        return ValidationResult(is_valid=False, errors=errors)

    trimmed = text.strip()
    if not trimmed:
        errors.append("Input cannot be empty or contain only whitespace")
        return ValidationResult(is_valid=False, errors=errors)

    if not FILE_BOUNDARY.search(trimmed) and not HUNK_HEADER.search(trimmed):
        errors.append(
            "Input does not appear to be a valid git diff "
            "(missing diff --git header or @@ hunk headers)"
        )

    if not allow_binary_files and BINARY_FILES.search(trimmed):
        errors.append("Binary file diffs are not allowed")

    suspicious = find_suspicious_content(trimmed)
    if suspicious:
        logger.warning(f"Suspicious diff content detected: {', '.join(suspicious)}")
        errors.append("Input contains potentially malicious content")

    return ValidationResult(is_valid=not errors, errors=errors)


def is_valid_git_diff(text: str, **options) -> bool:
    return validate_git_diff(text, **options).is_valid


def ensure_valid_git_diff(text: str, **options) -> None:
    """Raise DiffValidationError when ``text`` fails validation."""
    result = validate_git_diff(text, **options)
    if not result.is_valid:
        raise DiffValidationError(f"Invalid git diff: {', '.join(result.errors)}", result.errors)
