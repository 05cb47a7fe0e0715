"""Render successful responses as rich tables or canonical JSON.

JSON mode is pass-through: the body is re-serialized with its keys in the
order the API sent them. Table mode is a curated projection through a
:class:`ResponseShape`; undeclared fields never appear and missing ones
render as empty cells.
"""

from __future__ import annotations

import io
import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from rich.console import Console, RenderableType
from rich.table import Table

from vector_cli.errors import ResponseFormatError, VectorError
from vector_cli.registry import ResponseShape, ShapeKind
from vector_cli.services.formatters import lookup, text
from vector_cli.services.output_mode import OutputMode


@dataclass
class RenderedOutput:
    """Stdout blocks (strings or rich renderables) plus stderr notices."""

    blocks: list[RenderableType] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)

    def write(self, console: Console, err_console: Console) -> None:
        for block in self.blocks:
            if isinstance(block, str):
                console.out(block, highlight=False)
            else:
                console.print(block)
        for notice in self.notices:
            err_console.out(notice, highlight=False)

    def as_text(self, width: int = 120) -> str:
        """Plain-text stdout, for tests and non-terminal callers."""
        buffer = io.StringIO()
        console = Console(file=buffer, width=width, color_system=None, force_terminal=False)
        for block in self.blocks:
            if isinstance(block, str):
                console.out(block, highlight=False)
            else:
                console.print(block)
        return buffer.getvalue()


class _Values(dict):
    """``format_map`` source: missing keys and nulls render as ``-``."""

    def __missing__(self, key: str) -> str:
        return "-"


def render(
    body: bytes | Any,
    shape: ResponseShape,
    mode: OutputMode,
    *,
    context: Mapping[str, Any] | None = None,
    pretty: bool = True,
) -> RenderedOutput:
    data = _decode(body)
    if mode is OutputMode.JSON:
        return _render_json(data, pretty)
    return _render_table(data, shape, dict(context or {}))


def to_json(data: Any, pretty: bool = True) -> str:
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def _decode(body: bytes | Any) -> Any:
    if not isinstance(body, (bytes, bytearray)):
        return body
    raw = bytes(body).strip()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ResponseFormatError(f"Invalid JSON in response: {exc}") from exc


def _render_json(data: Any, pretty: bool) -> RenderedOutput:
    if data is None:
        return RenderedOutput()
    return RenderedOutput(blocks=[to_json(data, pretty)])


def _render_table(data: Any, shape: ResponseShape, context: dict[str, Any]) -> RenderedOutput:
    root = _root(data, shape)
    if shape.kind is ShapeKind.LIST:
        output = _render_list(data, root, shape)
    elif shape.kind is ShapeKind.DETAIL:
        output = _render_detail(root, shape)
    elif shape.kind is ShapeKind.MESSAGE:
        output = _render_message(data, root, shape, context)
    else:
        output = _render_log(root, shape)

    if shape.hints and (root is not None or shape.kind is ShapeKind.MESSAGE):
        values = _values(root, context)
        output.blocks.append("")
        output.blocks.extend(hint.format_map(values) for hint in shape.hints)
    return output


def _root(data: Any, shape: ResponseShape) -> Any:
    if not shape.root:
        return data
    root = lookup(data, shape.root)
    if root is None and isinstance(data, list):
        return data
    return root


def _render_list(data: Any, rows: Any, shape: ResponseShape) -> RenderedOutput:
    if rows is None:
        rows = []
    if not isinstance(rows, list):
        raise ResponseFormatError(f"Expected a list at '{shape.root}' in the response")
    if not rows:
        return RenderedOutput(blocks=[shape.empty_message or "No results."])

    table = Table()
    for index, column in enumerate(shape.columns):
        table.add_column(column.header, style="cyan" if index == 0 else None)
    for row in rows:
        table.add_row(*(column.render(row) for column in shape.columns))

    output = RenderedOutput(blocks=[table])
    footer = _pagination(data)
    if footer:
        output.blocks.append("\n" + footer)
    return output


def _pagination(data: Any) -> str | None:
    meta = lookup(data, "meta")
    if not isinstance(meta, dict):
        return None
    current, last, total = (meta.get(k) for k in ("current_page", "last_page", "total"))
    if not all(isinstance(v, int) for v in (current, last, total)):
        return None
    if last <= 1:
        return None
    return f"Page {current} of {last} ({total} total)"


def _render_detail(obj: Any, shape: ResponseShape) -> RenderedOutput:
    if obj is None:
        if shape.empty_message:
            return RenderedOutput(blocks=[shape.empty_message])
        raise ResponseFormatError(f"Missing '{shape.root}' in the response")
    if not isinstance(obj, dict):
        raise ResponseFormatError(f"Expected an object at '{shape.root}' in the response")
    if shape.empty_message and all(
        lookup(obj, column.path) is None for column in shape.columns
    ):
        return RenderedOutput(blocks=[shape.empty_message])

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for column in shape.columns:
        table.add_row(column.header, column.render(obj))

    output = RenderedOutput(blocks=[table])
    for section in shape.sections:
        content = lookup(obj, section.path)
        if content:
            output.blocks.append(f"\n--- {section.header} ---\n{text(content).rstrip()}")
    return output


def _render_message(
    data: Any, root: Any, shape: ResponseShape, context: dict[str, Any]
) -> RenderedOutput:
    if shape.success_field and isinstance(root, dict):
        if lookup(root, shape.success_field) is False:
            failure = lookup(root, shape.failure_field)
            raise VectorError(text(failure) if failure else "Request failed")

    if shape.message_field:
        override = lookup(data, shape.message_field)
        if override is None:
            override = lookup(root, shape.message_field)
        if isinstance(override, str) and override:
            return RenderedOutput(blocks=[override])

    template = shape.message or ""
    return RenderedOutput(blocks=[template.format_map(_values(root, context))])


def _render_log(root: Any, shape: ResponseShape) -> RenderedOutput:
    tables = lookup(root, "logs.tables")
    if not isinstance(tables, list):
        return RenderedOutput(blocks=[shape.empty_message or "No logs available."])

    lines: list[str] = []
    for table in tables:
        rows = lookup(table, "rows")
        if not isinstance(rows, list):
            continue
        for row in rows:
            if not isinstance(row, list):
                continue
            parts = [cell for cell in row if isinstance(cell, str)]
            if parts:
                lines.append(" | ".join(parts))

    output = RenderedOutput(blocks=lines)
    cursor = lookup(root, "cursor")
    if lookup(root, "has_more") is True and isinstance(cursor, str):
        output.notices.extend(["", f"More results available. Use --cursor {cursor} to continue."])
    return output


def _values(root: Any, context: Mapping[str, Any]) -> _Values:
    values = _Values()
    for key, value in context.items():
        if value is not None:
            values[key] = text(value)
    if isinstance(root, dict):
        for key, value in root.items():
            if value is not None:
                values[key] = text(value)
    return values


def format_template(template: str, root: Any = None, context: Mapping[str, Any] | None = None) -> str:
    """Fill ``{name}`` placeholders from *root* and *context*; unknown names become ``-``."""
    return template.format_map(_values(root, context or {}))
