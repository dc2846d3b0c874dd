"""Strategy selection: Direct, Chunked or Summarized."""

from __future__ import annotations

from typing import List, Sequence

from loguru import logger

from ..config import ProcessorConfig
from .models import DiffUnit, Strategy


class StrategySelector:
    """
    Picks exactly one processing mode per request.

    The modes are terminal: nothing here retries a different strategy.
    """

    def __init__(self, config: ProcessorConfig):
        self.config = config

    def needs_processing(self, raw_size: int) -> bool:
        """True when the raw diff is too large to forward unmodified."""
        return raw_size > self.config.max_direct_size

    def choose(self, raw_size: int, truncated: bool) -> Strategy:
        if not self.needs_processing(raw_size):
            strategy = Strategy.DIRECT
        elif truncated and self.config.enable_summarization:
            strategy = Strategy.SUMMARIZED
        else:
            strategy = Strategy.CHUNKED
        logger.debug(f"Strategy {strategy.value} for {raw_size} bytes (truncated={truncated})")
        return strategy

    def summary_units(self, selected: Sequence[DiffUnit]) -> List[DiffUnit]:
        """Units whose excerpts go into a Summarized payload."""
        important = [u for u in selected if u.priority >= self.config.summary_min_priority]
        return important[: self.config.summary_max_units]


def choose_strategy(raw_size: int, truncated: bool, config: ProcessorConfig) -> Strategy:
    """Functional form of :meth:`StrategySelector.choose`."""
    return StrategySelector(config).choose(raw_size, truncated)
