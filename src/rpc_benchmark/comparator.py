"""Compares endpoints and declares an overall winner."""
import logging
from typing import Dict, Mapping

from .constants import BenchmarkConstants
from .models import ComparisonResult, EndpointAggregate, MetricComparison


# Configure logging
logger = logging.getLogger(__name__)


class EndpointComparator:
    """Ranks endpoints per metric and picks a winner by majority vote over p50, p95 and p99."""

    @staticmethod
    def percent_improvement(fastest: float, slowest: float) -> float:
        """Share of the slowest value saved by the fastest one; 0.0 when the slowest value is 0."""
        if slowest == 0:
            return 0.0
        return round((slowest - fastest) / slowest * 100, BenchmarkConstants.STATS_PRECISION)

    @staticmethod
    def compare_metric(aggregates: Mapping[str, EndpointAggregate], metric: str) -> MetricComparison:
        # Stable sort: on equal values the first-seen endpoint ranks fastest
        ranked = sorted(aggregates.items(), key=lambda item: getattr(item[1].stats, metric))
        fastest_name, fastest = ranked[0]
        slowest_name, slowest = ranked[-1]
        fastest_value = getattr(fastest.stats, metric)
        slowest_value = getattr(slowest.stats, metric)
        return MetricComparison(
            fastest_endpoint=fastest_name,
            fastest_value=fastest_value,
            slowest_endpoint=slowest_name,
            slowest_value=slowest_value,
            absolute_delta=round(slowest_value - fastest_value, BenchmarkConstants.STATS_PRECISION),
            percent_improvement=EndpointComparator.percent_improvement(fastest_value, slowest_value),
        )

    @staticmethod
    def compare(aggregates: Mapping[str, EndpointAggregate]) -> ComparisonResult:
        """
        Compare endpoint aggregates.

        Args:
            aggregates: Endpoint name to aggregate, in run order.

        Returns:
            ComparisonResult; an inconclusive one with a message when fewer than two endpoints are given.
        """
        if len(aggregates) < BenchmarkConstants.MIN_ENDPOINTS_TO_COMPARE:
            return ComparisonResult(
                message=f"Need at least {BenchmarkConstants.MIN_ENDPOINTS_TO_COMPARE} endpoints to compare"
            )

        # Endpoints without a single successful call have all-zero stats and are not ranked
        no_data = [name for name, aggregate in aggregates.items() if aggregate.stats.count == 0]
        ranked = {name: aggregate for name, aggregate in aggregates.items() if name not in no_data} or aggregates
        if no_data:
            logger.warning(f"Excluded from ranking, no successful calls: {', '.join(no_data)}")

        comparisons = {
            metric: EndpointComparator.compare_metric(ranked, metric)
            for metric in BenchmarkConstants.COMPARISON_METRICS
        }

        votes: Dict[str, int] = {}
        for metric in BenchmarkConstants.VOTING_METRICS:
            winner = comparisons[metric].fastest_endpoint
            votes[winner] = votes.get(winner, 0) + 1

        # Equal vote counts go to the endpoint listed first
        overall_winner = max((name for name in ranked if name in votes), key=votes.get)
        voting = ", ".join(BenchmarkConstants.VOTING_METRICS)
        summary = (f"{overall_winner} is faster on {votes[overall_winner]}/"
                   f"{len(BenchmarkConstants.VOTING_METRICS)} key metrics ({voting})")
        if no_data and len(no_data) < len(aggregates):
            summary += f"; no successful calls from {', '.join(no_data)}"
        logger.info(summary)

        return ComparisonResult(
            metric_comparisons=comparisons,
            overall_winner=overall_winner,
            votes=votes,
            summary=summary,
        )
