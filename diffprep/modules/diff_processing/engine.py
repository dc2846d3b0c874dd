"""
Diff Processing Engine.

High-level API combining all stages: splitting, priority scoring,
budgeting, strategy selection and payload assembly.

The engine is stateless: it holds only its configuration and the stage
objects built from it, so one instance can serve concurrent requests.
"""

from __future__ import annotations

from typing import List, Optional

from loguru import logger

from ..config import ProcessorConfig
from .budgeter import Budgeter, order_by_priority
from .models import TRUNCATION_MARKER, DiffUnit, ProcessedResult, Strategy, utf8_len
from .priority_scorer import PriorityScorer
from .splitter import DiffSplitter, check_structure, truncate_text
from .strategy import StrategySelector
from .summary_builder import SummaryBuilder


class DiffProcessingEngine:
    """
    Reduces a raw diff to a bounded payload for a text-generation service.

    Usage:
        engine = DiffProcessingEngine(ProcessorConfig(max_total_size=100 * 1024))
        result = engine.process(raw_diff)

        send(result.payload)
        report(result.processing_info().to_wire())
    """

    def __init__(self, config: Optional[ProcessorConfig] = None):
        self.config = config or ProcessorConfig()

        self.splitter = DiffSplitter(
            max_chunk_size=self.config.max_chunk_size,
            max_files=self.config.max_files,
            reserve=self.config.truncation_reserve,
        )
        self.scorer = PriorityScorer()
        self.budgeter = Budgeter(
            max_total_size=self.config.max_total_size,
            min_useful_remainder=self.config.min_useful_remainder,
            reserve=self.config.truncation_reserve,
        )
        self.selector = StrategySelector(self.config)
        self.summary_builder = SummaryBuilder()

    def process(self, raw: str) -> ProcessedResult:
        """
        Run the full pipeline over ``raw``.

        Raises:
            EmptyInputError: input is empty or whitespace only
            MalformedDiffError: input has no file or hunk headers
        """
        check_structure(raw)
        original_size = utf8_len(raw)

        if not self.selector.needs_processing(original_size):
            return self._process_direct(raw, original_size)

        split = self.splitter.split_with_stats(raw)
        scored = self.scorer.score_units(split.units)
        budget = self.budgeter.select(scored)

        content_dropped = budget.truncated or split.dropped_files > 0
        is_truncated = content_dropped or any(u.truncated for u in budget.selected)
        summary = self.summary_builder.build(split.stats)

        strategy = self.selector.choose(original_size, content_dropped)

        if strategy == Strategy.SUMMARIZED:
            selected = [self._excerpt(u) for u in self.selector.summary_units(budget.selected)]
            payload = self.summary_builder.summarized(
                summary,
                listed=[u.stat for u in split.units],
                excerpts=selected,
                omitted=split.dropped_files,
            )
        else:
            selected = budget.selected
            payload = self.summary_builder.chunked(
                summary, selected, split.total_files, is_truncated
            )

        logger.info(
            f"Processed diff: {original_size} -> {utf8_len(payload)} bytes, "
            f"{len(selected)}/{split.total_files} files, strategy={strategy.value}"
        )

        return ProcessedResult(
            selected=selected,
            summary=summary,
            total_files=split.total_files,
            total_lines_added=split.total_lines_added,
            total_lines_deleted=split.total_lines_deleted,
            is_truncated=is_truncated,
            strategy=strategy,
            payload=payload,
            original_size=original_size,
            files_analyzed=len(selected),
        )

    def _process_direct(self, raw: str, original_size: int) -> ProcessedResult:
        """Forward ``raw`` unmodified; accounting comes from an unlimited scan."""
        split = self.splitter.split_with_stats(raw, apply_limits=False)
        selected: List[DiffUnit] = order_by_priority(self.scorer.score_units(split.units))

        logger.debug(f"Direct processing for {original_size} bytes, {split.total_files} files")

        return ProcessedResult(
            selected=selected,
            summary=self.summary_builder.build(split.stats),
            total_files=split.total_files,
            total_lines_added=split.total_lines_added,
            total_lines_deleted=split.total_lines_deleted,
            is_truncated=False,
            strategy=Strategy.DIRECT,
            payload=raw,
            original_size=original_size,
            files_analyzed=len(selected),
        )

    def _excerpt(self, unit: DiffUnit) -> DiffUnit:
        limit = self.config.summary_excerpt_size
        if unit.size <= limit:
            return unit
        kept = truncate_text(unit.body, limit, prefer_hunks=False)
        return unit.with_body(kept + TRUNCATION_MARKER)


def process_diff(raw: str, config: Optional[ProcessorConfig] = None) -> ProcessedResult:
    """
    Convenience function to process a diff with an optional config.

    Returns:
        ProcessedResult with the payload and processing metadata
    """
    return DiffProcessingEngine(config).process(raw)
