"""
Diff Splitter for Large Diff Processing.

Segments raw unified-diff text into ordered per-file units, extracting
the post-change path, the change kind and line counts, and truncating any
oversized unit at a content-aware boundary.

This is the foundation layer that identifies WHAT changed.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from loguru import logger

from .errors import EmptyInputError, MalformedDiffError
from .models import (
    TRUNCATION_MARKER,
    ChangeKind,
    DiffStat,
    DiffUnit,
    SplitResult,
    utf8_len,
)

UNKNOWN_PATH = "(unknown)"
DEV_NULL = "/dev/null"

# Regex patterns for recognizing unified diff structure
DIFF_FILE_HEADER = re.compile(r'^diff --git "?a/(.+?)"? "?b/(.+?)"?$')
FILE_BOUNDARY = re.compile(r"^diff --git ", re.MULTILINE)
PLAIN_FILE_BOUNDARY = re.compile(r"^--- [^\n]*\n\+\+\+ ", re.MULTILINE)
HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@", re.MULTILINE)
NEW_FILE_MODE = re.compile(r"^new file mode")
DELETED_FILE_MODE = re.compile(r"^deleted file mode")
RENAME_FROM = re.compile(r"^rename from (.+)$")
RENAME_TO = re.compile(r"^rename to (.+)$")


def check_structure(raw: str) -> None:
    """
    Reject input that does not look like a diff at all.

    Raises:
        EmptyInputError: input is empty or whitespace only
        MalformedDiffError: no file header and no hunk header anywhere
    """
    if not raw or not raw.strip():
        raise EmptyInputError("Input cannot be empty or contain only whitespace")
    if not FILE_BOUNDARY.search(raw) and not HUNK_HEADER.search(raw):
        raise MalformedDiffError(
            "Input does not appear to be a valid git diff "
            "(missing diff --git header or @@ hunk headers)"
        )


def truncate_text(text: str, limit: int, prefer_hunks: bool = True) -> str:
    """
    Cut ``text`` to at most ``limit`` UTF-8 bytes at a sensible boundary.

    Prefers the last hunk header at or before ``limit`` (when it keeps at
    least 70% of the allowance), then the last newline (80%), then a hard
    cut. The first line is always kept. No marker is appended.
    """
    data = text.encode("utf-8")
    if len(data) <= limit:
        return text

    limit = max(0, limit)
    cut = -1
    if prefer_hunks:
        hunk_boundary = data.rfind(b"\n@@", 0, limit + 3)
        if hunk_boundary > limit * 0.7:
            cut = hunk_boundary
    if cut < 0:
        line_boundary = data.rfind(b"\n", 0, limit + 1)
        if line_boundary > limit * 0.8:
            cut = line_boundary
    if cut < 0:
        cut = limit

    header_end = data.find(b"\n")
    if header_end < 0:
        header_end = len(data)
    cut = max(cut, header_end)

    return data[:cut].decode("utf-8", errors="ignore")


def _strip_side_prefix(path: str) -> str:
    # "+++ b/src/app.py\t2024-01-01 ..." -> "src/app.py"
    path = path.split("\t", 1)[0].strip().strip('"')
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


class DiffSplitter:
    """
    Splits unified diff text into per-file DiffUnits.

    Usage:
        splitter = DiffSplitter(max_chunk_size=50 * 1024, max_files=100)
        units = splitter.split(raw_diff)

        for unit in units:
            print(f"{unit.path}: {unit.kind.value} +{unit.lines_added}/-{unit.lines_deleted}")
    """

    def __init__(
        self,
        max_chunk_size: int = 50 * 1024,
        max_files: int = 100,
        reserve: int = 100,  # Bytes kept free for the truncation marker
    ):
        self.max_chunk_size = max_chunk_size
        self.max_files = max_files
        self.reserve = reserve

    def split(self, raw: str) -> List[DiffUnit]:
        """Split ``raw`` into at most ``max_files`` units in file order."""
        return self.split_with_stats(raw).units

    def split_with_stats(self, raw: str, apply_limits: bool = True) -> SplitResult:
        """
        Split ``raw`` and account for every file section.

        Args:
            raw: Unified diff text
            apply_limits: When False, no unit is truncated and no file cap applies

        Returns:
            SplitResult whose ``units`` honour the limits and whose ``stats``
            cover all file sections found
        """
        check_structure(raw)

        result = SplitResult()
        sections = self._partition(raw)

        for section in sections:
            unit = self._parse_section(section)
            result.stats.append(unit.stat)

            if apply_limits and len(result.units) >= self.max_files:
                continue

            if apply_limits and unit.original_size > self.max_chunk_size:
                kept = truncate_text(unit.body, self.max_chunk_size - self.reserve)
                unit = unit.with_body(kept + TRUNCATION_MARKER)
                logger.debug(
                    f"Truncated {unit.path} from {unit.original_size} to {unit.size} bytes"
                )

            result.units.append(unit)

        if result.dropped_files:
            logger.debug(
                f"File cap reached: kept {len(result.units)} of {result.total_files} file sections"
            )

        return result

    def _partition(self, raw: str) -> List[str]:
        """Partition raw text into per-file sections, discarding any preamble."""
        starts = [m.start() for m in FILE_BOUNDARY.finditer(raw)]

        if not starts:
            # Plain unified diff without git headers
            starts = [m.start() for m in PLAIN_FILE_BOUNDARY.finditer(raw)]

        if not starts:
            # Bare hunks: treat everything from the first hunk as one section
            first_hunk = HUNK_HEADER.search(raw)
            return [raw[first_hunk.start():]] if first_hunk else []

        ends = starts[1:] + [len(raw)]
        return [raw[start:end] for start, end in zip(starts, ends)]

    def _parse_section(self, section: str) -> DiffUnit:
        """Extract path, kind and line counts from one file section."""
        lines = section.split("\n")
        header_lines = self._header_lines(lines)

        path, kind = self._classify(header_lines)
        if path == UNKNOWN_PATH:
            logger.warning("File section without a parsable path header")

        added, deleted = count_changed_lines(lines)

        return DiffUnit(
            path=path,
            kind=kind,
            body=section,
            lines_added=added,
            lines_deleted=deleted,
            original_size=utf8_len(section),
        )

    @staticmethod
    def _header_lines(lines: List[str]) -> List[str]:
        header: List[str] = []
        for line in lines:
            if line.startswith("@@"):
                break
            header.append(line)
        return header

    @staticmethod
    def _classify(header_lines: List[str]) -> Tuple[str, ChangeKind]:
        """Determine the post-change path and change kind from header lines."""
        git_path: Optional[str] = None
        old_path: Optional[str] = None
        new_path: Optional[str] = None
        rename_to: Optional[str] = None
        kind = ChangeKind.MODIFIED

        for line in header_lines:
            match = DIFF_FILE_HEADER.match(line)
            if match:
                git_path = match.group(2)
            elif NEW_FILE_MODE.match(line):
                kind = ChangeKind.ADDED
            elif DELETED_FILE_MODE.match(line):
                kind = ChangeKind.DELETED
            elif RENAME_FROM.match(line):
                kind = ChangeKind.RENAMED
            elif RENAME_TO.match(line):
                kind = ChangeKind.RENAMED
                rename_to = RENAME_TO.match(line).group(1).strip()
            elif line.startswith("--- "):
                old_path = _strip_side_prefix(line[4:])
            elif line.startswith("+++ "):
                new_path = _strip_side_prefix(line[4:])

        if kind == ChangeKind.MODIFIED and git_path is None:
            # Plain diffs mark creation and deletion with /dev/null
            if old_path == DEV_NULL:
                kind = ChangeKind.ADDED
            elif new_path == DEV_NULL:
                kind = ChangeKind.DELETED

        for candidate in (rename_to, new_path, git_path, old_path):
            if candidate and candidate != DEV_NULL:
                return candidate, kind
        return UNKNOWN_PATH, kind


def count_changed_lines(lines: List[str]) -> Tuple[int, int]:
    """Count '+' and '-' lines, skipping the '+++' and '---' file headers."""
    added = 0
    deleted = 0
    for line in lines:
        if line.startswith("+"):
            if not line.startswith("+++"):
                added += 1
        elif line.startswith("-"):
            if not line.startswith("---"):
                deleted += 1
    return added, deleted
