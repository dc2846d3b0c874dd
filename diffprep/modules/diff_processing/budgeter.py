"""
Budgeter for Large Diff Processing.

Orders scored units by priority and greedily fills a total byte budget,
optionally admitting one partially truncated trailing unit.

The ordering is stable: among equal priorities the splitter's file order
wins, which decides which file survives when the budget is tight.
"""

from __future__ import annotations

from typing import List, Sequence

from loguru import logger

from .models import TRUNCATION_MARKER, BudgetResult, DiffUnit, utf8_len
from .splitter import truncate_text


def order_by_priority(units: Sequence[DiffUnit]) -> List[DiffUnit]:
    """Sort by priority descending, keeping discovery order on ties."""
    # sorted() is stable, so equal priorities keep their input order.
    return sorted(units, key=lambda u: -u.priority)


class Budgeter:
    """
    Selects the highest-priority units that fit within a byte budget.

    Usage:
        budgeter = Budgeter(max_total_size=400 * 1024)
        result = budgeter.select(scored_units)
        if result.truncated:
            ...
    """

    def __init__(
        self,
        max_total_size: int = 400 * 1024,
        min_useful_remainder: int = 1000,  # Smallest space worth a partial unit
        reserve: int = 100,                # Room left for the truncation marker
    ):
        self.max_total_size = max_total_size
        self.min_useful_remainder = min_useful_remainder
        self.reserve = reserve

    def select(self, units: Sequence[DiffUnit]) -> BudgetResult:
        """
        Greedily accumulate units in priority order until the budget overflows.

        Args:
            units: Scored units in file-discovery order

        Returns:
            BudgetResult with the selected units and the truncation flag
        """
        ordered = order_by_priority(units)
        result = BudgetResult()

        for unit in ordered:
            size = unit.size
            if result.total_size + size <= self.max_total_size:
                result.selected.append(unit)
                result.total_size += size
                continue

            # First overflow: stop here, possibly keeping a partial copy
            result.truncated = True
            remaining = self.max_total_size - result.total_size
            if remaining > self.min_useful_remainder:
                kept = truncate_text(unit.body, remaining - self.reserve, prefer_hunks=False)
                partial = unit.with_body(kept + TRUNCATION_MARKER)
                result.selected.append(partial)
                result.total_size += utf8_len(partial.body)
                logger.debug(
                    f"Budget overflow at {unit.path}: kept {partial.size} of {size} bytes"
                )
            else:
                logger.debug(
                    f"Budget overflow at {unit.path}: {remaining} bytes left, unit dropped"
                )
            break

        result.dropped = len(ordered) - len(result.selected)
        return result
