"""
Unit tests for JSONL structured logging.
"""

import json

from core.structured_log import get_log_file, jlog, read_recent_logs


class TestStructuredLog:
    """Tests for jlog and read_recent_logs."""

    def test_writes_jsonl(self, isolated_logs):
        jlog("generation", echo=False, index=1, score=-0.25)

        log_file = get_log_file()
        assert log_file.parent == isolated_logs
        lines = log_file.read_text(encoding="utf-8").splitlines()
        entry = json.loads(lines[-1])
        assert entry["event"] == "generation"
        assert entry["level"] == "INFO"
        assert entry["score"] == -0.25
        assert "ts" in entry

    def test_echo_prints(self, capsys):
        jlog("search_start", generation_size=4)
        assert "search_start" in capsys.readouterr().out

    def test_read_recent_filters_level(self):
        jlog("a", echo=False)
        jlog("b", level="ERROR", echo=False)
        jlog("c", echo=False)

        assert [e["event"] for e in read_recent_logs()] == ["a", "b", "c"]
        assert [e["event"] for e in read_recent_logs(level="ERROR")] == ["b"]
        assert [e["event"] for e in read_recent_logs(count=2)] == ["b", "c"]

    def test_read_without_log(self):
        assert read_recent_logs() == []

    def test_non_serializable_fields(self):
        jlog("odd", echo=False, value=object())
        assert read_recent_logs()[-1]["event"] == "odd"
