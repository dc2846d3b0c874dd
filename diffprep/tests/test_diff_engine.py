"""
Integration tests for the diff processing engine.

Verifies the full pipeline from splitting through strategy selection and
the externally reported processing record.
"""

import pytest

from diffprep.modules.config import KIB, MIB, ProcessorConfig
from diffprep.modules.diff_processing import (
    DiffProcessingEngine,
    DiffSplitter,
    EmptyInputError,
    MalformedDiffError,
    Strategy,
    TRUNCATION_MARKER,
    choose_strategy,
    process_diff,
    utf8_len,
)
from diffprep.tests.mocks import PLAIN_PROSE, make_file_diff, make_sized_file_diff


def sized_diff(count, each_bytes, path_fmt="src/module_{}.txt"):
    return "".join(make_sized_file_diff(path_fmt.format(i), each_bytes) for i in range(count))


class TestExampleScenarios:
    """End-to-end scenarios for the three strategies and the error paths."""

    def test_small_single_file_is_direct(self):
        raw = make_sized_file_diff("src/app.py", 2 * KIB)
        result = DiffProcessingEngine().process(raw)

        assert result.strategy == Strategy.DIRECT
        assert result.is_truncated is False
        assert result.payload == raw
        assert len(result.selected) == 1
        assert result.selected[0].body == raw
        assert result.total_files == 1

    def test_sixty_files_without_summarization_is_chunked(self):
        raw = sized_diff(60, 2 * KIB)
        config = ProcessorConfig(
            max_direct_size=50 * KIB,
            max_total_size=100 * KIB,
            enable_summarization=False,
        )
        result = DiffProcessingEngine(config).process(raw)

        assert result.strategy == Strategy.CHUNKED
        assert result.is_truncated is True
        assert result.total_files == 60
        full_units = [u for u in result.selected if not u.truncated]
        assert 45 <= len(full_units) <= 50
        assert len(result.selected) - len(full_units) <= 1
        assert sum(u.size for u in result.selected) <= 100 * KIB
        assert result.payload.startswith("DIFF SUMMARY: 60 files changed")

    def test_manifest_ordered_before_test_file(self):
        raw = make_file_diff("src/foo.test.ts", added=1, deleted=1) + make_file_diff(
            "package.json", added=1, deleted=1
        )
        # Force the chunked path so ordering is visible in the payload
        config = ProcessorConfig(max_direct_size=100)
        result = DiffProcessingEngine(config).process(raw)

        assert result.strategy == Strategy.CHUNKED
        assert [u.path for u in result.selected] == ["package.json", "src/foo.test.ts"]
        assert result.selected[0].priority > result.selected[1].priority
        assert result.payload.index("File: package.json") < result.payload.index("File: src/foo.test.ts")

    def test_manifest_ordered_first_in_direct_mode(self):
        raw = make_file_diff("src/foo.test.ts", added=1, deleted=1) + make_file_diff(
            "package.json", added=1, deleted=1
        )
        result = DiffProcessingEngine().process(raw)

        assert result.strategy == Strategy.DIRECT
        assert [u.path for u in result.selected] == ["package.json", "src/foo.test.ts"]

    @pytest.mark.timeout(60)
    def test_huge_diff_is_summarized(self):
        raw = sized_diff(2500, 2 * KIB, path_fmt="src/service_{}.py")
        assert utf8_len(raw) > 4 * MIB

        result = DiffProcessingEngine().process(raw)

        assert result.strategy == Strategy.SUMMARIZED
        assert result.is_truncated is True
        assert len(result.selected) <= 5
        assert all(u.priority >= 4 for u in result.selected)
        assert result.total_files == 2500
        stats = DiffSplitter().split_with_stats(raw, apply_limits=False)
        assert result.total_lines_added == stats.total_lines_added
        assert result.summary.startswith("2500 files changed")
        assert "... and 2400 more files" in result.payload
        for unit in result.selected:
            assert utf8_len(unit.body) <= 2000 + utf8_len(TRUNCATION_MARKER)
        assert utf8_len(result.payload) < 64 * KIB

    def test_prose_is_malformed(self):
        with pytest.raises(MalformedDiffError):
            DiffProcessingEngine().process(PLAIN_PROSE)

    def test_blank_is_empty(self):
        with pytest.raises(EmptyInputError):
            process_diff("  \n")


class TestSummarizedMode:
    """Tests for the excerpts and file list of the summarized view."""

    def test_excerpts_respect_excerpt_size(self):
        raw = sized_diff(10, 3 * KIB, path_fmt="src/svc_{}.py")
        config = ProcessorConfig(max_direct_size=4 * KIB, max_total_size=8 * KIB, summary_excerpt_size=500)
        result = DiffProcessingEngine(config).process(raw)

        assert result.strategy == Strategy.SUMMARIZED
        assert result.selected
        for unit in result.selected:
            assert unit.truncated is True
            assert unit.body.endswith(TRUNCATION_MARKER)
            assert utf8_len(unit.body) <= 500 + utf8_len(TRUNCATION_MARKER)
            assert unit.body in result.payload

    def test_file_cap_alone_forces_summarized(self):
        raw = "".join(make_file_diff(f"src/f{i}.py", added=10) for i in range(8))
        config = ProcessorConfig(max_direct_size=512, max_files=3)
        result = DiffProcessingEngine(config).process(raw)

        # well under the byte budget, only the file cap drops sections
        assert utf8_len(raw) < config.max_total_size
        assert result.strategy == Strategy.SUMMARIZED
        assert result.is_truncated is True
        assert result.total_files == 8
        assert "... and 5 more files" in result.payload
        assert 0 < len(result.selected) <= 3
        assert all(u.priority >= 4 for u in result.selected)

    def test_file_cap_without_summarization_is_chunked(self):
        raw = "".join(make_file_diff(f"src/f{i}.py", added=10) for i in range(8))
        config = ProcessorConfig(max_direct_size=512, max_files=3, enable_summarization=False)
        result = DiffProcessingEngine(config).process(raw)

        assert result.strategy == Strategy.CHUNKED
        assert result.is_truncated is True
        assert len(result.selected) == 3
        assert result.payload.count("File: src/f") == 3


class TestStrategySelection:
    """Tests for the strategy decision table."""

    def test_decision_table(self):
        config = ProcessorConfig(max_direct_size=1000)
        assert choose_strategy(1000, True, config) == Strategy.DIRECT
        assert choose_strategy(1001, False, config) == Strategy.CHUNKED
        assert choose_strategy(1001, True, config) == Strategy.SUMMARIZED

    def test_summarization_disabled(self):
        config = ProcessorConfig(max_direct_size=1000, enable_summarization=False)
        assert choose_strategy(5000, True, config) == Strategy.CHUNKED

    def test_strategy_monotonic_in_size(self):
        config = ProcessorConfig(max_direct_size=1000)
        rank = {Strategy.DIRECT: 0, Strategy.CHUNKED: 1, Strategy.SUMMARIZED: 2}
        for truncated in (False, True):
            ranks = [rank[choose_strategy(size, truncated, config)] for size in range(0, 5000, 250)]
            assert ranks == sorted(ranks)

    def test_chunked_when_everything_fits(self):
        raw = sized_diff(10, 2 * KIB)
        config = ProcessorConfig(max_direct_size=10 * KIB, max_total_size=100 * KIB)
        result = DiffProcessingEngine(config).process(raw)

        assert result.strategy == Strategy.CHUNKED
        assert result.is_truncated is False
        assert len(result.selected) == 10


class TestInvariants:
    """Tests for properties that must hold on every run."""

    @pytest.fixture
    def config(self):
        return ProcessorConfig(
            max_direct_size=8 * KIB,
            max_chunk_size=6 * KIB,
            max_total_size=30 * KIB,
            max_files=20,
            enable_summarization=False,
        )

    @pytest.fixture
    def raw(self):
        parts = []
        for i in range(30):
            path = ["src/a{}.py", "docs/readme_{}.md", "tests/test_{}.py", "dist/{}.min.js"][i % 4].format(i)
            parts.append(make_file_diff(path, added=(i * 7) % 130, deleted=i % 3, line_width=40))
        parts.append(make_file_diff("src/huge.py", added=400, line_width=60))
        return "".join(parts)

    def test_subset_invariant(self, config, raw):
        result = DiffProcessingEngine(config).process(raw)
        split_paths = [u.path for u in DiffSplitter(max_files=config.max_files).split(raw)]

        assert all(u.path in split_paths for u in result.selected)
        assert len(result.selected) <= result.total_files

    def test_totals_cover_all_sections(self, config, raw):
        result = DiffProcessingEngine(config).process(raw)
        full = DiffSplitter().split_with_stats(raw, apply_limits=False)

        assert result.total_files == 31
        assert result.total_lines_added == full.total_lines_added
        assert result.total_lines_deleted == full.total_lines_deleted

    def test_budget_invariant(self, config, raw):
        result = DiffProcessingEngine(config).process(raw)
        assert sum(u.size for u in result.selected) <= config.max_total_size

    def test_ordering_invariant(self, config, raw):
        result = DiffProcessingEngine(config).process(raw)
        split_order = [u.path for u in DiffSplitter(max_files=config.max_files).split(raw)]

        priorities = [u.priority for u in result.selected]
        assert priorities == sorted(priorities, reverse=True)
        for a, b in zip(result.selected, result.selected[1:]):
            if a.priority == b.priority:
                assert split_order.index(a.path) < split_order.index(b.path)

    def test_truncation_flag_when_files_capped(self, config, raw):
        result = DiffProcessingEngine(config).process(raw)
        # 31 sections, cap of 20
        assert result.is_truncated is True

    def test_truncation_flag_when_only_a_body_was_cut(self):
        raw = make_file_diff("src/huge.py", added=400, line_width=60) + make_file_diff("src/small.py")
        config = ProcessorConfig(max_direct_size=4 * KIB, max_chunk_size=8 * KIB, max_total_size=400 * KIB)
        result = DiffProcessingEngine(config).process(raw)

        assert len(result.selected) == result.total_files == 2
        assert any(u.truncated for u in result.selected)
        assert result.is_truncated is True
        assert result.strategy == Strategy.CHUNKED

    def test_process_is_deterministic(self, config, raw):
        engine = DiffProcessingEngine(config)
        first = engine.process(raw)
        second = engine.process(raw)

        assert first.selected == second.selected
        assert first.payload == second.payload


class TestProcessingInfo:
    """Tests for the externally reported processing record."""

    def test_wire_shape(self):
        raw = make_file_diff("src/app.py")
        info = DiffProcessingEngine().process(raw).processing_info().to_wire()

        assert set(info) == {
            "originalSize",
            "processedSize",
            "filesAnalyzed",
            "totalFiles",
            "wasTruncated",
            "processingStrategy",
        }
        assert info["processingStrategy"] == "direct"
        assert info["originalSize"] == info["processedSize"] == utf8_len(raw)
        assert info["filesAnalyzed"] == 1
        assert info["wasTruncated"] is False

    def test_chunked_record(self):
        raw = sized_diff(60, 2 * KIB)
        config = ProcessorConfig(max_direct_size=50 * KIB, max_total_size=100 * KIB, enable_summarization=False)
        result = DiffProcessingEngine(config).process(raw)
        info = result.processing_info()

        assert info.processing_strategy == "chunked"
        assert info.original_size == utf8_len(raw)
        assert info.processed_size == utf8_len(result.payload)
        assert info.files_analyzed == len(result.selected)
        assert info.total_files == 60
        assert info.was_truncated is True
