"""Generates visualizations from benchmark results."""
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import matplotlib.pyplot as plt
import numpy as np

from .constants import BenchmarkConstants


# Configure logging
logger = logging.getLogger(__name__)

WIDE_RULE = "═" * 80
THIN_RULE = "─" * 80
BAR_ROWS = (
    ("Min", "min"),
    ("Mean", "mean"),
    ("p50 (median)", "p50"),
    ("p95", "p95"),
    ("p99", "p99"),
    ("Max", "max"),
)


class VisualizationGenerator:
    """Generates text and image visualizations from a run result."""

    @staticmethod
    def create_bar_chart(label: str, value: float, max_value: float, width: int = 50) -> str:
        """One ASCII bar scaled against ``max_value``."""
        filled = round(value / max_value * width) if max_value > 0 else 0
        filled = min(max(filled, 0), width)
        return f"{label.ljust(15)} {'█' * filled}{'░' * (width - filled)} {value:.2f}ms"

    def render_text(self, body: Dict[str, Any]) -> str:
        """
        Render a run result as a console report.

        Args:
            body: Run result envelope as produced by BenchmarkRunner or loaded from disk.

        Returns:
            Multi-line report with per-endpoint bars, the metric table, the verdict and recommendations.
        """
        lines = ["", WIDE_RULE, "RPC PROVIDER COMPARISON - VISUAL RESULTS".rjust(50), WIDE_RULE, ""]
        test_config = body["testConfig"]
        lines += [
            "TEST CONFIGURATION",
            "",
            f"   Iterations:           {test_config['iterations']}",
            f"   Calls per iteration:  {test_config['callsPerIteration']}",
            f"   Total calls/provider: {test_config['totalCallsPerProvider']}",
            f"   Timestamp:            {body['timestamp']}",
            "",
        ]

        results = body["results"]
        comparison = body.get("comparison", {})
        winner = comparison.get("overallWinner")

        all_values = [result["stats"][key] for result in results.values() for _, key in BAR_ROWS]
        max_value = max(all_values, default=0) * 1.1

        for endpoint, result in results.items():
            stats = result["stats"]
            is_winner = endpoint == winner
            lines += [THIN_RULE, "", f"{'🏆 ' if is_winner else '   '}{endpoint.upper()}{' (Winner)' if is_winner else ''}", ""]
            lines += [self.create_bar_chart(label, stats[key], max_value) for label, key in BAR_ROWS]
            success_rate = result["successfulCalls"] / result["totalCalls"] * 100 if result["totalCalls"] else 0.0
            lines += ["", f"   Total calls: {stats['count']} | Success rate: {success_rate:.1f}%", ""]
        lines.append(THIN_RULE)

        metric_comparisons = comparison.get("metricComparisons") or {}
        if not winner or not metric_comparisons:
            lines += ["", f"   {comparison.get('message', 'No comparison available')}", "", WIDE_RULE, ""]
            return "\n".join(lines)

        lines += ["", "METRIC-BY-METRIC COMPARISON", ""]
        for metric in BenchmarkConstants.COMPARISON_METRICS:
            comp = metric_comparisons[metric]
            lines.append(
                f"   {metric.upper():<6} | {comp['fastestEndpoint']:<10} {comp['fastestValue']:>7}ms | "
                f"{comp['slowestEndpoint']:<10} {comp['slowestValue']:>7}ms | "
                f"Δ {comp['absoluteDelta']:>6}ms ({comp['percentImprovement']:>5}%)"
            )

        lines += ["", WIDE_RULE, "", "🏆 FINAL VERDICT", "", f"   {comparison['summary']}", f"   Winner: {winner.upper()}", ""]
        lines += ["RECOMMENDATIONS", ""]
        lines += self.recommendations(results, comparison)
        lines += ["", WIDE_RULE, ""]
        return "\n".join(lines)

    @staticmethod
    def recommendations(results: Dict[str, Any], comparison: Dict[str, Any]) -> List[str]:
        winner = comparison["overallWinner"]
        p50_improvement = comparison["metricComparisons"]["p50"]["percentImprovement"]
        p99_improvement = comparison["metricComparisons"]["p99"]["percentImprovement"]
        lines = []

        if p50_improvement > 20:
            lines += [f"   ✓ {winner} shows significant improvement (>20%) at p50",
                      "     → Strong recommendation for typical workloads"]
        elif p50_improvement > 10:
            lines += [f"   ✓ {winner} shows moderate improvement (10-20%) at p50",
                      "     → Recommended for performance-sensitive applications"]
        else:
            lines += ["   ~ Marginal difference (<10%) at p50",
                      "     → Consider cost and other factors"]

        if p99_improvement > 20:
            lines += [f"   ✓ {winner} shows significant improvement (>20%) at p99",
                      "     → Excellent for applications requiring consistent SLAs"]

        for endpoint, result in results.items():
            stats = result["stats"]
            if not stats["p50"]:
                continue
            ratio = stats["p99"] / stats["p50"]
            if ratio < 2:
                lines.append(f"   ✓ {endpoint} shows excellent consistency (p99/p50 ratio: {ratio:.2f})")
            elif ratio > 3:
                lines.append(f"   ⚠ {endpoint} shows high variability (p99/p50 ratio: {ratio:.2f})")
        return lines

    def plot_results(self, body: Dict[str, Any], output_path: Union[Path, str]) -> None:
        """
        Generate and save a grouped bar chart of p50/p95/p99/mean per endpoint.

        Args:
            body: Run result envelope.
            output_path: Path to save plot.
        """
        results = body["results"]
        if not results:
            logger.warning("No endpoint results to plot. Skipping graph.")
            return

        metrics = BenchmarkConstants.COMPARISON_METRICS
        x = np.arange(len(metrics))
        width = 0.8 / len(results)
        fig, ax = plt.subplots(figsize=(12, 6))

        for i, (endpoint, result) in enumerate(results.items()):
            values = [result["stats"][metric] for metric in metrics]
            bars = ax.bar(x + (i - (len(results) - 1) / 2) * width, values, width, label=endpoint)
            for bar, val in zip(bars, values):
                ax.text(bar.get_x() + bar.get_width()/2, bar.get_height(), f'{val:.0f}', ha='center', va='bottom', fontsize=8)

        winner = body.get("comparison", {}).get("overallWinner")
        ax.set_title(f"eth_call latency by endpoint (winner: {winner})" if winner else "eth_call latency by endpoint")
        ax.set_xticks(x)
        ax.set_xticklabels([metric.upper() for metric in metrics])
        ax.set_ylabel("Latency (ms)")
        ax.legend()
        ax.grid(True, axis='y', alpha=0.3)

        plt.tight_layout()
        plt.savefig(output_path)
        plt.close(fig)
        logger.info(f"Graph saved: {output_path}")
