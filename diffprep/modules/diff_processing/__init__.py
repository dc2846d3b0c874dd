"""
Diff Processing Package for Bounded Generation Prompts.

This package reduces a unified diff of arbitrary size to a payload that fits
a text-generation service's context window while keeping the signal needed
to summarize the change.

Components:
- DiffSplitter: Splits raw diff text into per-file units
- PriorityScorer: Scores units by estimated importance
- Budgeter: Greedily fills a byte budget in priority order
- StrategySelector: Chooses Direct, Chunked or Summarized processing
- SummaryBuilder: Renders aggregate statistics and payload text
- DiffProcessingEngine: High-level API combining all components
"""

from .errors import (
    DiffProcessingError,
    DiffValidationError,
    EmptyInputError,
    MalformedDiffError,
)

from .models import (
    TRUNCATION_MARKER,
    BudgetResult,
    ChangeKind,
    DiffStat,
    DiffUnit,
    ProcessedResult,
    SplitResult,
    Strategy,
    utf8_len,
)

from .splitter import (
    DiffSplitter,
    check_structure,
    truncate_text,
)

from .priority_scorer import (
    PriorityScorer,
    ScoringRule,
    DEFAULT_RULES,
)

from .budgeter import (
    Budgeter,
    order_by_priority,
)

from .strategy import (
    StrategySelector,
    choose_strategy,
)

from .summary_builder import (
    SummaryBuilder,
    build_summary,
)

from .engine import (
    DiffProcessingEngine,
    process_diff,
)

__all__ = [
    # Errors
    "DiffProcessingError",
    "DiffValidationError",
    "EmptyInputError",
    "MalformedDiffError",
    # Data model
    "TRUNCATION_MARKER",
    "BudgetResult",
    "ChangeKind",
    "DiffStat",
    "DiffUnit",
    "ProcessedResult",
    "SplitResult",
    "Strategy",
    "utf8_len",
    # Splitting
    "DiffSplitter",
    "check_structure",
    "truncate_text",
    # Scoring
    "PriorityScorer",
    "ScoringRule",
    "DEFAULT_RULES",
    # Budgeting
    "Budgeter",
    "order_by_priority",
    # Strategy
    "StrategySelector",
    "choose_strategy",
    # Summary
    "SummaryBuilder",
    "build_summary",
    # High-level API
    "DiffProcessingEngine",
    "process_diff",
]
