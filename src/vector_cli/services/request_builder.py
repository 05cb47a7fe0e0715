"""Turn a descriptor plus user arguments into a concrete HTTP request.

Everything here runs before the network is touched: argument counts, unknown
fields, required fields, declared types and field dependencies are checked,
and any failure is a local :class:`ValidationError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping, Sequence
from urllib.parse import quote, urlencode

from vector_cli import __version__
from vector_cli.errors import AuthError, ValidationError
from vector_cli.registry import EndpointDescriptor, FieldLocation, FieldSpec, FieldType
from vector_common.constants import API_PREFIX

log = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE"})
USER_AGENT = f"vector-cli/{__version__}"


@dataclass
class OutgoingRequest:
    method: str
    url: str
    headers: dict[str, str]
    json: Any = None
    files: dict[str, tuple[str, bytes, str]] | None = None
    query: list[tuple[str, str]] = field(default_factory=list)

    @property
    def idempotent(self) -> bool:
        return self.method in IDEMPOTENT_METHODS


def build(
    descriptor: EndpointDescriptor,
    path_args: Sequence[Any],
    fields: Mapping[str, Any],
    token: str | None,
    base_url: str,
) -> OutgoingRequest:
    """Validate arguments and assemble the request for *descriptor*."""
    path = _render_path(descriptor, path_args)
    values = _coerce_fields(descriptor, fields)

    query: list[tuple[str, str]] = []
    payload: dict[str, Any] = {}
    files: dict[str, tuple[str, bytes, str]] = {}

    for spec in descriptor.fields:
        if spec.name not in values:
            continue
        value = values[spec.name]
        if spec.location is FieldLocation.QUERY:
            query.extend((spec.name, item) for item in _query_values(value))
        elif spec.location is FieldLocation.BODY:
            _set_path(payload, spec.target, value)
        else:
            files[spec.name] = value

    url = base_url.rstrip("/") + API_PREFIX + path
    if query:
        url += "?" + urlencode(query, quote_via=quote)

    headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
    if not descriptor.anonymous:
        if not token:
            raise AuthError()
        if not _header_safe(token):
            raise AuthError("Invalid API token: only printable ASCII characters are allowed")
        headers["Authorization"] = f"Bearer {token}"

    json_body = None
    if descriptor.method in ("POST", "PATCH", "PUT") and not files:
        json_body = payload

    return OutgoingRequest(
        method=descriptor.method,
        url=url,
        headers=headers,
        json=json_body,
        files=files or None,
        query=query,
    )


def _header_safe(value: str) -> bool:
    return all(" " <= ch <= "~" for ch in value)


def _render_path(descriptor: EndpointDescriptor, path_args: Sequence[Any]) -> str:
    params = descriptor.params
    if len(path_args) != len(params):
        if len(path_args) < len(params):
            missing = params[len(path_args)]
            raise ValidationError(f"Missing required argument: {_arg_name(missing)}")
        raise ValidationError(
            f"'{descriptor.command}' takes {len(params)} argument(s), got {len(path_args)}"
        )
    by_name = dict(zip(params, path_args))
    parts: list[str] = []
    for literal, name in descriptor.segments:
        parts.append(literal)
        if name is None:
            continue
        raw = by_name[name]
        value = "" if raw is None else str(raw).strip()
        if not value:
            raise ValidationError(f"Argument {_arg_name(name)} must not be empty")
        parts.append(quote(value, safe=""))
    return "".join(parts)


def _coerce_fields(descriptor: EndpointDescriptor, fields: Mapping[str, Any]) -> dict[str, Any]:
    declared = {spec.name: spec for spec in descriptor.fields}
    unknown = sorted(name for name in fields if name not in declared)
    if unknown:
        raise ValidationError(
            f"Unknown field(s) for '{descriptor.command}': {', '.join(unknown)}"
        )

    values: dict[str, Any] = {}
    for spec in descriptor.fields:
        raw = fields.get(spec.name)
        if _absent(raw):
            if spec.required:
                raise ValidationError(f"Missing required option {spec.option}")
            if spec.default is None:
                continue
            raw = spec.default
        values[spec.name] = _coerce(spec, raw)

    for spec in descriptor.fields:
        if _absent(fields.get(spec.name)):
            continue
        for other in spec.requires:
            if other not in values:
                raise ValidationError(
                    f"{spec.option} requires {declared[other].option}"
                )
    return values


def _absent(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, (list, tuple)) and not raw:
        return True
    return False


def _coerce(spec: FieldSpec, raw: Any) -> Any:
    if spec.type is FieldType.INTEGER:
        if isinstance(raw, bool):
            raise ValidationError(f"Invalid value for {spec.option}: expected an integer")
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValidationError(
                f"Invalid value for {spec.option}: '{raw}' is not an integer"
            ) from None

    if spec.type is FieldType.ENUM:
        value = str(raw)
        if value not in spec.choices:
            raise ValidationError(
                f"Invalid value for {spec.option}: '{value}' is not one of "
                f"{', '.join(spec.choices)}"
            )
        return value

    if spec.type is FieldType.DATE:
        value = str(raw).strip()
        if not _is_iso_date(value):
            raise ValidationError(
                f"Invalid value for {spec.option}: '{value}' is not an ISO date"
            )
        return value

    if spec.type is FieldType.LIST:
        items = [raw] if isinstance(raw, str) else list(raw)
        out = [part.strip() for item in items for part in str(item).split(",")]
        return [part for part in out if part]

    if spec.type is FieldType.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        lowered = str(raw).strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        raise ValidationError(f"Invalid value for {spec.option}: '{raw}' is not a boolean")

    if spec.type is FieldType.FILE:
        return _read_upload(spec, Path(raw))

    return str(raw)


def _is_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        pass
    try:
        datetime.fromisoformat(value)
        return True
    except ValueError:
        return False


def _read_upload(spec: FieldSpec, path: Path) -> tuple[str, bytes, str]:
    path = path.expanduser()
    if not path.is_file():
        raise ValidationError(f"File not found: {path}")
    size = path.stat().st_size
    if spec.max_bytes is not None and size > spec.max_bytes:
        raise ValidationError(
            spec.too_large or f"File too large: {path} exceeds {spec.max_bytes} bytes"
        )
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise ValidationError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    log.debug("Attaching %s (%d bytes) as '%s'", path.name, size, spec.name)
    return path.name, content, "application/octet-stream"


def _query_values(value: Any) -> list[str]:
    if isinstance(value, bool):
        return ["true" if value else "false"]
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def _set_path(payload: dict[str, Any], dotted: str, value: Any) -> None:
    *parents, leaf = dotted.split(".")
    node = payload
    for key in parents:
        node = node.setdefault(key, {})
    node[leaf] = value


def _arg_name(name: str) -> str:
    return name.upper()
