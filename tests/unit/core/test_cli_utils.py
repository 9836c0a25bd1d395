"""
Tests for shared CLI utilities.
"""
import pytest

from counterpart.core.cli import RunStats, setup_logger


class TestRunStats:
    """Test RunStats tracking."""

    def test_initialization(self):
        stats = RunStats()
        assert stats.work_items == 0
        assert stats.violations == 0
        assert stats.failures == 0
        assert stats.is_clean

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError, match="violations must be non-negative"):
            RunStats(violations=-1)

    def test_summary(self):
        stats = RunStats(work_items=6, violations=2, failures=1)

        summary = stats.summary()
        assert summary.startswith("6 work items, 2 violations, 1 failures, ")
        assert summary.endswith("s")
        assert not stats.is_clean

    def test_duration_is_cached(self):
        stats = RunStats()
        assert stats.duration() == stats.duration()

    def test_to_dict(self):
        data = RunStats(work_items=4).to_dict()
        assert data["work_items"] == 4
        assert set(data) == {"work_items", "violations", "failures", "duration"}


def test_setup_logger_creates_operations_dir(tmp_path):
    logger = setup_logger(tmp_path, "check")

    assert (tmp_path / "operations").is_dir()
    assert logger.component_name == "check"
