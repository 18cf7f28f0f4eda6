"""Tests for pacgraph.core.console."""

import pytest

from pacgraph.core.console import LogLevel, debug, parse_log_level, set_log_level, timed_block, warning


class TestConsole:
    def test_messages_go_to_stderr(self, capsys) -> None:
        set_log_level(LogLevel.DEBUG)
        warning("corridor closed")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Warning: corridor closed" in captured.err

    def test_level_filters_messages(self, capsys) -> None:
        set_log_level(LogLevel.WARNING)
        debug("hidden")
        assert capsys.readouterr().err == ""

    def test_timed_block(self, capsys) -> None:
        set_log_level(LogLevel.INFO)
        with timed_block("compression"):
            pass
        err = capsys.readouterr().err
        assert "Started: compression" in err
        assert "Completed: compression" in err

    def test_parse_log_level(self) -> None:
        assert parse_log_level(" success ") == LogLevel.SUCCESS
        with pytest.raises(ValueError):
            parse_log_level("verbose")
