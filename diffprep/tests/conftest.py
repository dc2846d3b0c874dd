# Pytest configuration for the diffprep test suite
#
# Timeout strategy:
# - FAST tests: 10s (pure unit tests, no I/O)
# - MEDIUM tests: 30s (file I/O, threads, CLI)
# - SLOW tests: 60s (multi-megabyte diffs)

from __future__ import annotations

import pytest
from loguru import logger

# ---------------------------------------------------------------------------
# Timeout configuration by test file
# ---------------------------------------------------------------------------
# Maps test file patterns to timeout values (seconds)
# More specific patterns should come first

TIMEOUT_MAP = {
    # SLOW tests (60s) - Large generated diffs
    "test_diff_engine": 60,

    # MEDIUM tests (30s) - File I/O, threads, CLI
    "test_cli": 30,
    "test_config": 30,
    "test_cache": 30,

    # FAST tests (10s) - Pure unit tests
    "test_diff_splitter": 10,
    "test_priority_scorer": 10,
    "test_budgeter": 10,
    "test_summary_builder": 10,
    "test_validation": 10,
    "test_response_parser": 10,
}


def pytest_collection_modifyitems(config, items):
    """Apply timeout markers based on test file names."""
    for item in items:
        test_file = item.path.name
        test_name = test_file.replace('.py', '')

        timeout = 30  # default
        for pattern, t in TIMEOUT_MAP.items():
            if pattern in test_name:
                timeout = t
                break

        # Explicit per-test markers win
        if item.get_closest_marker('timeout') is None:
            item.add_marker(pytest.mark.timeout(timeout))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks added during a test so they never outlive captured streams."""
    yield
    logger.remove()
