"""
Tests for the run_search demo CLI.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

import run_search  # noqa: E402
from core.structured_log import read_recent_logs  # noqa: E402


class TestRunSearch:
    """Tests for scripts/run_search.py."""

    def test_runs_requested_generations(self, capsys):
        """Should print and log one line per requested generation."""
        code = run_search.main([
            "--generations", "3", "--generation-size", "4", "--refine-count", "2",
            "--seed", "1", "--samples", "20",
        ])

        assert code == 0
        out = capsys.readouterr().out
        assert out.count("Gen ") == 3

        events = [e["event"] for e in read_recent_logs()]
        assert events[0] == "search_start"
        assert events.count("generation") == 3
        assert events[-1] == "search_end"

    def test_zero_generations(self):
        """Zero generations is a valid, empty run."""
        assert run_search.main(["--generations", "0", "--seed", "3", "--samples", "5"]) == 0

    def test_parallel_workers(self):
        """Should complete with a multi-threaded search."""
        assert run_search.main([
            "--generations", "2", "--generation-size", "6", "--refine-count", "3",
            "--workers", "3", "--seed", "2", "--samples", "10",
        ]) == 0

    def test_bad_configuration_exits_nonzero(self):
        """An invalid search configuration exits 1 and logs search_failed."""
        code = run_search.main(["--generation-size", "2", "--refine-count", "5"])

        assert code == 1
        failure = read_recent_logs(level="ERROR")[-1]
        assert failure["event"] == "search_failed"
        assert failure["error_code"] == "CONFIG_ERROR"

    @pytest.mark.parametrize("flags", [
        ["--generations", "-1"],
        ["--seed", "-1"],
        ["--inputs", "0"],
        ["--seed", "abc"],
    ])
    def test_invalid_flags_rejected_by_parser(self, flags, capsys):
        """Out-of-range flags exit with a usage error instead of a traceback."""
        with pytest.raises(SystemExit) as exc_info:
            run_search.main(flags)
        assert exc_info.value.code == 2
        assert "argument --" in capsys.readouterr().err

    def test_parser_defaults(self):
        """Search parameters default to None so settings apply."""
        args = run_search.build_parser().parse_args([])
        assert args.generations == 20
        assert args.generation_size is None
        assert args.seed is None

    def test_rejects_unknown_flag(self):
        """Unknown flags are a usage error."""
        with pytest.raises(SystemExit):
            run_search.build_parser().parse_args(["--population", "3"])
