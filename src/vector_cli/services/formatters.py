"""Cell formatters used by response shapes.

A formatter receives a non-null JSON value and returns the text shown in a
table cell. Missing and null values never reach a formatter; they render as
an empty cell.
"""

from __future__ import annotations

import json
from typing import Any


def lookup(obj: Any, path: str) -> Any:
    """Follow a dotted path through dicts and lists; ``None`` when absent."""
    if not path:
        return obj
    current = obj
    for key in path.split("."):
        if isinstance(current, dict):
            if key not in current:
                return None
            current = current[key]
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            return None
    return current


def text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def yes_no(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return text(value)


def joined(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(text(v) for v in value if v is not None)
    return text(value)


def seconds(value: Any) -> str:
    return f"{value}s"


def rate(config: Any) -> str:
    """``request_count/timeframe`` of a WAF rate-limit configuration."""
    if not isinstance(config, dict):
        return ""
    return f"{config.get('request_count', 0)}/{config.get('timeframe', 0)}s"


def actor(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("token_name") or value.get("ip") or "")
    return text(value)


def resource(value: Any) -> str:
    if not isinstance(value, dict) or not value.get("type"):
        return ""
    if value.get("id"):
        return f"{value['type']}:{value['id']}"
    return str(value["type"])


def masked(value: Any) -> str:
    raw = text(value)
    return raw[:8] + "..." if len(raw) > 8 else raw
