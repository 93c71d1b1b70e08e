"""Unit tests for latency statistics."""

import pytest

from src.rpc_benchmark.latency_analyzer import LatencyAnalyzer
from src.rpc_benchmark.models import Statistics
from tests.test_const import CALL_QUOTER, CALL_RESERVES, FIVE_SAMPLES


class TestPercentile:
    """Test linear-interpolation percentiles."""

    def test_single_sample(self):
        """Every percentile of a single sample is that sample."""
        for fraction in (0.0, 0.5, 0.99, 1.0):
            assert LatencyAnalyzer.percentile([42.0], fraction) == 42.0

    def test_interpolates_between_ranks(self):
        """p95 of five samples sits between the two largest."""
        assert LatencyAnalyzer.percentile(FIVE_SAMPLES, 0.95) == pytest.approx(48.0)
        assert LatencyAnalyzer.percentile(FIVE_SAMPLES, 0.99) == pytest.approx(49.6)

    def test_boundaries_are_min_and_max(self):
        """Fractions 0 and 1 return the extremes."""
        assert LatencyAnalyzer.percentile(FIVE_SAMPLES, 0.0) == 10.0
        assert LatencyAnalyzer.percentile(FIVE_SAMPLES, 1.0) == 50.0

    def test_even_count_median(self):
        """The median of an even-sized sample is the mean of the middle pair."""
        assert LatencyAnalyzer.percentile([1.0, 2.0, 3.0, 4.0], 0.5) == pytest.approx(2.5)

    @pytest.mark.parametrize("fraction", [-0.1, 1.5])
    def test_out_of_range_fraction(self, fraction):
        """Fractions outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            LatencyAnalyzer.percentile(FIVE_SAMPLES, fraction)


class TestComputeStatistics:
    """Test summary statistics."""

    def test_empty_sample(self):
        """An empty sample gives all zeros."""
        stats = LatencyAnalyzer.compute_statistics([])
        assert stats == Statistics()
        assert stats.count == 0
        assert stats.p99 == 0.0

    def test_five_samples(self):
        """Known statistics for 10..50."""
        stats = LatencyAnalyzer.compute_statistics([30.0, 10.0, 50.0, 20.0, 40.0])
        assert stats.count == 5
        assert stats.min == 10.0
        assert stats.max == 50.0
        assert stats.mean == 30.0
        assert stats.median == 30.0
        assert stats.p50 == 30.0
        assert stats.p95 == 48.0
        assert stats.p99 == 49.6

    def test_ordering_invariant(self):
        """min <= p50 <= p95 <= p99 <= max and min <= mean <= max."""
        stats = LatencyAnalyzer.compute_statistics([3.2, 150.7, 12.9, 8.0, 8.0, 99.1, 41.3])
        assert stats.min <= stats.p50 <= stats.p95 <= stats.p99 <= stats.max
        assert stats.min <= stats.mean <= stats.max
        assert stats.median == stats.p50

    def test_rounded_to_two_decimals(self):
        """Presented statistics carry at most two decimals."""
        stats = LatencyAnalyzer.compute_statistics([1.111, 2.222, 3.339])
        assert stats.mean == 2.22
        assert stats.max == 3.34

    def test_idempotent(self):
        """Repeated computation over the same input gives the same result."""
        samples = [5.0, 1.0, 3.0]
        assert LatencyAnalyzer.compute_statistics(samples) == LatencyAnalyzer.compute_statistics(samples)
        assert samples == [5.0, 1.0, 3.0]


class TestPhaseStatistics:
    """Test per-phase statistics."""

    def test_absent_phases_excluded(self, outcome_builder):
        """Calls without a DNS phase are left out of the DNS statistics, not counted as zero."""
        successes = [
            outcome_builder.success(CALL_RESERVES, total=20.0, dns=4.0, tcp=6.0),
            outcome_builder.success(CALL_QUOTER, total=10.0, reused=True),
            outcome_builder.success(CALL_QUOTER, total=12.0, reused=True),
        ]

        phase_stats = LatencyAnalyzer.compute_phase_statistics(successes)

        assert set(phase_stats) == {"dns", "tcp", "tls", "ttfb", "total"}
        assert phase_stats["dns"].count == 1
        assert phase_stats["dns"].mean == 4.0
        assert phase_stats["tls"] == Statistics()
        assert phase_stats["total"].count == 3
        assert phase_stats["total"].max == 20.0
