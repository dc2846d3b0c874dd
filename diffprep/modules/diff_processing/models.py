"""
Data structures for the diff processing pipeline.

DiffUnit is the per-file segment produced by the splitter. Instances are
frozen: scoring and truncation produce new values through ``with_priority``
and ``with_body`` instead of mutating in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from ..schemas import ProcessingInfo


TRUNCATION_MARKER = "\n... (truncated)"


def utf8_len(text: str) -> int:
    """Size of ``text`` in UTF-8 bytes."""
    return len(text.encode("utf-8"))


class ChangeKind(str, Enum):
    """How a file was changed."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"


class Strategy(str, Enum):
    """Processing mode chosen for a diff."""

    DIRECT = "direct"
    CHUNKED = "chunked"
    SUMMARIZED = "summarized"


@dataclass(frozen=True)
class DiffStat:
    """Lightweight accounting record for one file section."""
    path: str
    kind: ChangeKind
    lines_added: int = 0
    lines_deleted: int = 0

    @property
    def lines_changed(self) -> int:
        return self.lines_added + self.lines_deleted


@dataclass(frozen=True)
class DiffUnit:
    """One file's worth of change."""
    path: str
    kind: ChangeKind
    body: str                    # header + hunks, possibly truncated
    lines_added: int = 0
    lines_deleted: int = 0
    priority: int = 0            # 0 until scored, then 1-5
    original_size: int = 0       # UTF-8 bytes of the body as extracted
    truncated: bool = False      # body shortened relative to extraction

    @property
    def lines_changed(self) -> int:
        return self.lines_added + self.lines_deleted

    @property
    def size(self) -> int:
        return utf8_len(self.body)

    @property
    def header(self) -> str:
        return self.body.split("\n", 1)[0]

    @property
    def stat(self) -> DiffStat:
        return DiffStat(
            path=self.path,
            kind=self.kind,
            lines_added=self.lines_added,
            lines_deleted=self.lines_deleted,
        )

    def with_priority(self, priority: int) -> "DiffUnit":
        return replace(self, priority=priority)

    def with_body(self, body: str) -> "DiffUnit":
        """Return a copy carrying a shortened body."""
        return replace(self, body=body, truncated=True)


@dataclass
class SplitResult:
    """Output of a splitter pass.

    ``units`` is capped at ``max_files``; ``stats`` covers every file
    section discovered in the input, including the ones past the cap.
    """
    units: List[DiffUnit] = field(default_factory=list)
    stats: List[DiffStat] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.stats)

    @property
    def total_lines_added(self) -> int:
        return sum(s.lines_added for s in self.stats)

    @property
    def total_lines_deleted(self) -> int:
        return sum(s.lines_deleted for s in self.stats)

    @property
    def dropped_files(self) -> int:
        return len(self.stats) - len(self.units)


@dataclass
class BudgetResult:
    """Units chosen by the budgeter and whether anything was cut."""
    selected: List[DiffUnit] = field(default_factory=list)
    truncated: bool = False
    total_size: int = 0
    dropped: int = 0


@dataclass
class ProcessedResult:
    """The output of one full engine run."""
    selected: List[DiffUnit]
    summary: str
    total_files: int
    total_lines_added: int
    total_lines_deleted: int
    is_truncated: bool
    strategy: Strategy
    payload: str = ""
    original_size: int = 0
    files_analyzed: Optional[int] = None

    @property
    def processed_size(self) -> int:
        return utf8_len(self.payload)

    def processing_info(self) -> ProcessingInfo:
        """Build the externally reported processing record."""
        files_analyzed = self.files_analyzed
        if files_analyzed is None:
            files_analyzed = len(self.selected)
        return ProcessingInfo(
            original_size=self.original_size,
            processed_size=self.processed_size,
            files_analyzed=files_analyzed,
            total_files=self.total_files,
            was_truncated=self.is_truncated,
            processing_strategy=self.strategy.value,
        )
