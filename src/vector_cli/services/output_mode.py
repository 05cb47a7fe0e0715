"""Table vs. JSON output decision, made once per invocation."""

from __future__ import annotations

import sys
from enum import Enum
from typing import TextIO


class OutputMode(str, Enum):
    JSON = "json"
    TABLE = "table"


def resolve(explicit: bool | None, stdout_is_terminal: bool) -> OutputMode:
    """``--json`` -> JSON, ``--no-json`` -> table, else JSON unless on a terminal."""
    if explicit is True:
        return OutputMode.JSON
    if explicit is False:
        return OutputMode.TABLE
    return OutputMode.TABLE if stdout_is_terminal else OutputMode.JSON


def is_terminal(stream: TextIO | None = None) -> bool:
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


def detect(explicit: bool | None, stream: TextIO | None = None) -> OutputMode:
    return resolve(explicit, is_terminal(stream))
