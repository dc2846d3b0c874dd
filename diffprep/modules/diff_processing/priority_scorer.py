"""
Priority Scorer for Large Diff Processing.

Assigns each DiffUnit an integer importance in [1, 5] from heuristics over
its path, change kind and change magnitude, so the budgeter can decide
which files to keep when a diff does not fit.

This layer determines WHAT is most important to include.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from loguru import logger

from .models import ChangeKind, DiffUnit

BASE_PRIORITY = 3
MIN_PRIORITY = 1
MAX_PRIORITY = 5

LARGE_CHANGE_LINES = 100
SMALL_CHANGE_LINES = 5

# Dependency manifests and lockfile-adjacent build descriptors
MANIFEST_NAMES = {
    "package.json",
    "cargo.toml",
    "pyproject.toml",
    "requirements.txt",
    "setup.py",
    "setup.cfg",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "gemfile",
    "composer.json",
}

DOC_PREFIXES = ("readme", "changelog")

SOURCE_EXTENSIONS = re.compile(
    r"\.(ts|tsx|js|jsx|mjs|cjs|py|rs|go|java|kt|scala|c|h|cc|cpp|hpp|cxx|cs|rb|php|swift)$"
)

TEST_MARKERS = ("test", "spec", "__tests__", ".test.")

GENERATED_MARKERS = ("node_modules", "dist/", "build/", "vendor/", ".min.")


def is_high_signal(unit: DiffUnit) -> bool:
    """Manifests, README/CHANGELOG, Dockerfiles and ``.config`` files."""
    name = posixpath.basename(unit.path).lower()
    if name in MANIFEST_NAMES:
        return True
    if name.startswith(DOC_PREFIXES):
        return True
    return "dockerfile" in name or ".config" in unit.path.lower()


def is_source_file(unit: DiffUnit) -> bool:
    return bool(SOURCE_EXTENSIONS.search(unit.path.lower()))


def is_test_file(unit: DiffUnit) -> bool:
    path = unit.path.lower()
    return any(marker in path for marker in TEST_MARKERS)


def is_generated_file(unit: DiffUnit) -> bool:
    path = unit.path.lower()
    return any(marker in path for marker in GENERATED_MARKERS)


def is_large_change(unit: DiffUnit) -> bool:
    return unit.lines_changed > LARGE_CHANGE_LINES


def is_small_change(unit: DiffUnit) -> bool:
    return unit.lines_changed < SMALL_CHANGE_LINES


def is_added_or_deleted(unit: DiffUnit) -> bool:
    return unit.kind in (ChangeKind.ADDED, ChangeKind.DELETED)


@dataclass(frozen=True)
class ScoringRule:
    """A named ``(predicate, delta)`` pair."""
    name: str
    predicate: Callable[[DiffUnit], bool]
    delta: int


# Applied in this order; deltas are summed, then clamped.
DEFAULT_RULES: Tuple[ScoringRule, ...] = (
    ScoringRule("high_signal", is_high_signal, +1),
    ScoringRule("source_code", is_source_file, +1),
    ScoringRule("test_file", is_test_file, -1),
    ScoringRule("generated", is_generated_file, -2),
    ScoringRule("large_change", is_large_change, +1),
    ScoringRule("small_change", is_small_change, -1),
    ScoringRule("added_or_deleted", is_added_or_deleted, +1),
)


class PriorityScorer:
    """
    Scores diff units by estimated importance.

    Usage:
        scorer = PriorityScorer()
        scored_units = scorer.score_units(units)
    """

    def __init__(self, rules: Iterable[ScoringRule] = DEFAULT_RULES):
        self.rules: Tuple[ScoringRule, ...] = tuple(rules)

    def score(self, unit: DiffUnit) -> int:
        """Return the clamped priority of ``unit``."""
        raw = BASE_PRIORITY + sum(rule.delta for rule in self.rules if rule.predicate(unit))
        return max(MIN_PRIORITY, min(MAX_PRIORITY, raw))

    def explain(self, unit: DiffUnit) -> List[str]:
        """Names of the rules that fired for ``unit``, in rule order."""
        return [rule.name for rule in self.rules if rule.predicate(unit)]

    def score_units(self, units: Iterable[DiffUnit]) -> List[DiffUnit]:
        """
        Attach a priority to every unit that does not have one yet.

        Units that already carry a priority are passed through unchanged.
        """
        scored: List[DiffUnit] = []
        for unit in units:
            if unit.priority:
                scored.append(unit)
                continue
            priority = self.score(unit)
            scored.append(unit.with_priority(priority))
        if scored:
            logger.debug(
                f"Scored {len(scored)} unit(s); "
                f"{sum(1 for u in scored if u.priority >= 4)} at priority >= 4"
            )
        return scored
