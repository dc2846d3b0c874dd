"""
Summary Builder for Large Diff Processing.

Renders aggregate statistics into a short human-readable string and
assembles the strategy-specific payload handed to prompt construction.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Protocol, Sequence

from .models import ChangeKind, DiffUnit

SECTION_SEPARATOR = "\n\n---\n\n"

# Order in which per-kind counts appear in the summary
KIND_ORDER = (ChangeKind.ADDED, ChangeKind.DELETED, ChangeKind.MODIFIED, ChangeKind.RENAMED)


class ChangeRecord(Protocol):
    path: str
    kind: ChangeKind
    lines_added: int
    lines_deleted: int


def build_summary(records: Iterable[ChangeRecord]) -> str:
    """
    Summarize file counts by kind and total line changes.

    Example: ``"3 files changed, 1 added, 2 modified, +40/-12 lines"``.
    Kinds with a zero count are omitted.
    """
    records = list(records)
    by_kind = Counter(r.kind for r in records)
    total_added = sum(r.lines_added for r in records)
    total_deleted = sum(r.lines_deleted for r in records)

    parts = [f"{len(records)} files changed"]
    for kind in KIND_ORDER:
        if by_kind[kind]:
            parts.append(f"{by_kind[kind]} {kind.value}")
    parts.append(f"+{total_added}/-{total_deleted} lines")

    return ", ".join(parts)


def describe_unit(unit: DiffUnit) -> str:
    return (
        f"File: {unit.path} ({unit.kind.value}, +{unit.lines_added}/-{unit.lines_deleted} lines, "
        f"priority: {unit.priority})"
    )


def build_chunked_payload(
    summary: str,
    selected: Sequence[DiffUnit],
    total_files: int,
    truncated: bool,
) -> str:
    """Header with aggregate totals followed by annotated unit bodies."""
    header_lines = [
        f"DIFF SUMMARY: {summary}",
        f"Files processed: {len(selected)}/{total_files}",
    ]
    if truncated:
        header_lines.append("Note: Some files were truncated due to size limits.")
    header = "\n".join(header_lines) + SECTION_SEPARATOR

    sections = [f"{describe_unit(unit)}\n{unit.body}" for unit in selected]
    return header + SECTION_SEPARATOR.join(sections)


def build_file_list(records: Sequence[ChangeRecord], omitted: int = 0) -> str:
    """One ``path: kind (+added/-deleted)`` line per record."""
    lines = [
        f"{r.path}: {r.kind.value} (+{r.lines_added}/-{r.lines_deleted})"
        for r in records
    ]
    if omitted > 0:
        lines.append(f"... and {omitted} more files")
    return "\n".join(lines)


def build_summarized_payload(
    summary: str,
    listed: Sequence[ChangeRecord],
    excerpts: Sequence[DiffUnit],
    omitted: int = 0,
) -> str:
    """Compact file list for every unit plus short excerpts of the key ones."""
    parts: List[str] = [
        f"LARGE DIFF SUMMARY: {summary}",
        "",
        "FILES CHANGED:",
        build_file_list(listed, omitted),
        "",
        "KEY CHANGES (most important files):",
    ]
    if excerpts:
        parts.append("\n\n".join(f"{unit.path}:\n{unit.body}" for unit in excerpts))
    else:
        parts.append("(no high-priority files)")
    parts.extend([
        "",
        "Note: This is a summarized view of a large changeset. Full details were truncated.",
    ])
    return "\n".join(parts)


class SummaryBuilder:
    """Object form of the module functions, mirroring the other pipeline stages."""

    def build(self, records: Iterable[ChangeRecord]) -> str:
        return build_summary(records)

    def chunked(self, summary: str, selected: Sequence[DiffUnit], total_files: int, truncated: bool) -> str:
        return build_chunked_payload(summary, selected, total_files, truncated)

    def summarized(
        self,
        summary: str,
        listed: Sequence[ChangeRecord],
        excerpts: Sequence[DiffUnit],
        omitted: int = 0,
    ) -> str:
        return build_summarized_payload(summary, listed, excerpts, omitted)
