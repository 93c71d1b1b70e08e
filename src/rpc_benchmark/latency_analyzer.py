"""Analyzes and computes latency statistics."""
import logging
from typing import Dict, Iterable, Sequence

import numpy as np

from .constants import BenchmarkConstants
from .models import CallSuccess, Statistics


# Configure logging
logger = logging.getLogger(__name__)


class LatencyAnalyzer:
    """Analyzes and computes latency statistics."""

    @staticmethod
    def percentile(sorted_samples: Sequence[float], fraction: float) -> float:
        """
        Percentile by linear interpolation between closest ranks.

        Args:
            sorted_samples: Samples in ascending order, at least one.
            fraction: Percentile as a fraction in [0, 1].

        Returns:
            The interpolated value at index (n - 1) * fraction.
        """
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"Percentile fraction must be within [0, 1], got {fraction}")
        return float(np.percentile(sorted_samples, fraction * 100))

    @staticmethod
    def compute_statistics(samples: Iterable[float]) -> Statistics:
        """
        Compute count, min, max, mean and p50/p95/p99.

        Args:
            samples: Latency measurements in milliseconds, in any order.

        Returns:
            Statistics rounded to two decimals; all zeros for an empty sample.
        """
        values = np.sort(np.asarray(list(samples), dtype=float))
        if values.size == 0:
            return Statistics()

        precision = BenchmarkConstants.STATS_PRECISION
        p50 = LatencyAnalyzer.percentile(values, 0.50)
        return Statistics(
            count=int(values.size),
            min=round(float(values[0]), precision),
            max=round(float(values[-1]), precision),
            mean=round(float(np.mean(values)), precision),
            median=round(p50, precision),
            p50=round(p50, precision),
            p95=round(LatencyAnalyzer.percentile(values, 0.95), precision),
            p99=round(LatencyAnalyzer.percentile(values, 0.99), precision),
        )

    @staticmethod
    def compute_phase_statistics(successes: Iterable[CallSuccess]) -> Dict[str, Statistics]:
        """Per-phase statistics; phases that did not happen on a call are left out, not zeroed."""
        successes = list(successes)
        phase_stats = {}
        for phase in BenchmarkConstants.PHASES:
            values = [s.timings.get(phase) for s in successes if s.timings.get(phase) is not None]
            phase_stats[phase] = LatencyAnalyzer.compute_statistics(values)
        return phase_stats
