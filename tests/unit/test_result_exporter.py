"""Unit tests for saving and loading run results."""

import json

import pandas as pd
import pytest

from src.rpc_benchmark.exceptions import BenchmarkExecutionError, ResultsNotFoundError
from src.rpc_benchmark.result_exporter import ResultExporter
from tests.test_const import ENDPOINT_A, ENDPOINT_B


class TestResultExporter:
    """Test result persistence."""

    def test_results_filename(self):
        """File names are derived from the timestamp and safe on every filesystem."""
        assert ResultExporter.results_filename("2026-10-18T09:30:00.123Z") == "test-2026-10-18T09-30-00-123Z.json"

    def test_save_and_load(self, result_body, tmp_path):
        """A saved result loads back unchanged."""
        path = ResultExporter.save_results(result_body, tmp_path / "nested")

        assert path.exists()
        assert path.name == "test-2026-10-18T09-30-00-123Z.json"
        assert ResultExporter.load_results(path) == result_body

    def test_load_wrapped_response(self, result_body, tmp_path):
        """Results wrapped as a {statusCode, body} response are unwrapped."""
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"statusCode": 200, "body": json.dumps(result_body)}), encoding="utf-8")

        assert ResultExporter.load_results(path) == result_body

    def test_load_failed_wrapped_response(self, tmp_path):
        """A non-200 wrapped response is a failed run."""
        path = tmp_path / "failed.json"
        path.write_text(json.dumps({"statusCode": 500, "body": "{}"}), encoding="utf-8")

        with pytest.raises(BenchmarkExecutionError):
            ResultExporter.load_results(path)

    def test_load_failure_envelope(self, tmp_path):
        """A saved failure envelope cannot be rendered."""
        path = tmp_path / "failure.json"
        path.write_text(json.dumps({"success": False, "error": "No endpoints configured"}), encoding="utf-8")

        with pytest.raises(BenchmarkExecutionError, match="No endpoints configured"):
            ResultExporter.load_results(path)

    def test_find_recent_results(self, tmp_path):
        """Recent results are listed newest first."""
        for stamp in ("2026-01-01", "2026-03-01", "2026-02-01"):
            (tmp_path / f"test-{stamp}.json").write_text("{}", encoding="utf-8")
        (tmp_path / "test-2026-03-01.csv").write_text("", encoding="utf-8")

        recent = ResultExporter.find_recent_results(tmp_path, limit=2)

        assert [path.name for path in recent] == ["test-2026-03-01.json", "test-2026-02-01.json"]
        assert ResultExporter.latest_results(tmp_path).name == "test-2026-03-01.json"

    def test_missing_results_dir(self, tmp_path):
        """A missing directory has no results."""
        missing = tmp_path / "missing"
        assert ResultExporter.find_recent_results(missing) == []
        with pytest.raises(ResultsNotFoundError):
            ResultExporter.latest_results(missing)

    def test_summary_frame(self, result_body):
        """One summary row per endpoint, with the winner flagged."""
        df = ResultExporter.summary_frame(result_body)

        assert isinstance(df, pd.DataFrame)
        assert list(df["endpoint"]) == [ENDPOINT_A, ENDPOINT_B]
        assert {"total_calls", "success_rate", "count", "p50_ms", "p95_ms", "p99_ms", "mean_ms"} <= set(df.columns)
        assert list(df["winner"]) == [False, True]
        assert df.loc[df["endpoint"] == ENDPOINT_B, "p50_ms"].iloc[0] == 80.0

    def test_save_summary_csv(self, result_body, tmp_path):
        """The CSV summary can be read back with pandas."""
        path = tmp_path / "summary.csv"

        ResultExporter.save_summary_csv(result_body, path)

        df = pd.read_csv(path)
        assert len(df) == 2
        assert list(df["endpoint"]) == [ENDPOINT_A, ENDPOINT_B]

    def test_save_summary_csv_without_results(self, result_body, tmp_path):
        """No CSV is written when there are no endpoint results."""
        path = tmp_path / "summary.csv"
        ResultExporter.save_summary_csv({**result_body, "results": {}}, path)
        assert not path.exists()
