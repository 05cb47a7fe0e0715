"""Tests for the output mode decision."""

from __future__ import annotations

import io

import pytest

from vector_cli.services.output_mode import OutputMode, detect, is_terminal, resolve


class FakeTty(io.StringIO):
    def isatty(self) -> bool:
        return True


class TestResolve:
    @pytest.mark.parametrize(
        ("explicit", "terminal", "expected"),
        [
            (True, True, OutputMode.JSON),
            (True, False, OutputMode.JSON),
            (False, True, OutputMode.TABLE),
            (False, False, OutputMode.TABLE),
            (None, False, OutputMode.JSON),
            (None, True, OutputMode.TABLE),
        ],
    )
    def test_truth_table(self, explicit, terminal, expected):
        assert resolve(explicit, terminal) is expected


class TestDetection:
    def test_pipe_is_not_a_terminal(self):
        assert is_terminal(io.StringIO()) is False

    def test_tty(self):
        assert is_terminal(FakeTty()) is True

    def test_closed_stream(self):
        stream = io.StringIO()
        stream.close()
        assert is_terminal(stream) is False
        assert detect(None, stream) is OutputMode.JSON

    def test_detect_with_override(self):
        assert detect(False, io.StringIO()) is OutputMode.TABLE
        assert detect(None, FakeTty()) is OutputMode.TABLE
