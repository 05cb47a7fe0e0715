"""Declarative endpoint descriptors and the immutable registry that holds them.

Every resource command is a row of data: an HTTP method, a path template,
the fields it accepts and the shape its response renders as. The registry is
built once at startup and validated up front, so a malformed descriptor fails
the process before any command runs.
"""

from __future__ import annotations

import difflib
import string
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Sequence

from vector_cli.errors import RegistryError
from vector_cli.services import formatters

METHODS = frozenset({"GET", "POST", "PATCH", "PUT", "DELETE"})
BODY_METHODS = frozenset({"POST", "PATCH", "PUT"})


class FieldType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    ENUM = "enum"
    DATE = "date"
    LIST = "list"
    BOOLEAN = "boolean"
    FILE = "file"


class FieldLocation(str, Enum):
    QUERY = "query"
    BODY = "body"
    FILE = "file"


class ShapeKind(str, Enum):
    LIST = "list"
    DETAIL = "detail"
    MESSAGE = "message"
    LOG = "log"


@dataclass(frozen=True)
class FieldSpec:
    """A query, body or file field accepted by an endpoint."""

    name: str
    location: FieldLocation = FieldLocation.BODY
    type: FieldType = FieldType.STRING
    required: bool = False
    default: Any = None
    choices: tuple[str, ...] = ()
    help: str = ""
    flag: str | None = None
    off_flag: str | None = None
    body_path: str | None = None
    requires: tuple[str, ...] = ()
    max_bytes: int | None = None
    too_large: str | None = None

    @property
    def option(self) -> str:
        return "--" + (self.flag or self.name).replace("_", "-")

    @property
    def off_option(self) -> str:
        if self.off_flag:
            return "--" + self.off_flag.replace("_", "-")
        return "--no-" + (self.flag or self.name).replace("_", "-")

    @property
    def target(self) -> str:
        """Dotted location of the value inside the JSON body."""
        return self.body_path or self.name


@dataclass(frozen=True)
class Column:
    """One renderable column: dotted field path, header, cell formatter."""

    path: str
    header: str
    formatter: Callable[[Any], str] = formatters.text

    def render(self, obj: Any) -> str:
        value = formatters.lookup(obj, self.path)
        if value is None:
            return ""
        return self.formatter(value)


@dataclass(frozen=True)
class ResponseShape:
    """Curated table-mode view of a response payload."""

    name: str
    kind: ShapeKind
    columns: tuple[Column, ...] = ()
    root: str = "data"
    empty_message: str | None = None
    message: str | None = None
    message_field: str | None = None
    success_field: str | None = None
    failure_field: str = "error"
    sections: tuple[Column, ...] = ()
    hints: tuple[str, ...] = ()

    def validate(self) -> None:
        if self.kind in (ShapeKind.LIST, ShapeKind.DETAIL) and not self.columns:
            raise RegistryError(f"Shape '{self.name}' declares no columns")
        if self.kind is ShapeKind.MESSAGE and not self.message:
            raise RegistryError(f"Shape '{self.name}' declares no message")


@dataclass(frozen=True)
class EndpointDescriptor:
    """Maps one ``<noun> <verb>`` command onto one HTTP request."""

    noun: tuple[str, ...]
    verb: str
    method: str
    path: str
    shape: ResponseShape
    params: tuple[str, ...] = ()
    fields: tuple[FieldSpec, ...] = ()
    help: str = ""
    anonymous: bool = False
    confirm: str | None = None

    @property
    def command(self) -> str:
        return " ".join((*self.noun, self.verb))

    @property
    def key(self) -> tuple[str, str]:
        return " ".join(self.noun), self.verb

    @property
    def segments(self) -> list[tuple[str, str | None]]:
        """Ordered ``(literal, placeholder)`` pairs of the path template."""
        return [(literal, name) for literal, name, _, _ in string.Formatter().parse(self.path)]

    @property
    def placeholders(self) -> tuple[str, ...]:
        return tuple(name for _, name in self.segments if name is not None)

    def field(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def validate(self) -> None:
        where = f"'{self.command}'"
        if self.method not in METHODS:
            raise RegistryError(f"{where}: unsupported method {self.method}")
        if not self.noun or not all(self.noun) or not self.verb:
            raise RegistryError(f"{where}: noun and verb must be non-empty")
        if not self.path.startswith("/"):
            raise RegistryError(f"{where}: path must start with '/'")
        try:
            placeholders = self.placeholders
        except ValueError as exc:
            raise RegistryError(f"{where}: malformed path template: {exc}") from exc
        if placeholders != self.params:
            raise RegistryError(
                f"{where}: path placeholders {list(placeholders)} "
                f"do not match positional arguments {list(self.params)}"
            )
        if len(set(self.params)) != len(self.params):
            raise RegistryError(f"{where}: duplicate positional argument")

        names = [spec.name for spec in self.fields]
        if len(set(names)) != len(names):
            raise RegistryError(f"{where}: duplicate field name")
        if set(names) & set(self.params):
            raise RegistryError(f"{where}: field shadows a positional argument")

        locations = {spec.location for spec in self.fields}
        if FieldLocation.FILE in locations and FieldLocation.BODY in locations:
            raise RegistryError(f"{where}: file uploads cannot carry JSON body fields")
        if locations - {FieldLocation.QUERY} and self.method not in BODY_METHODS:
            raise RegistryError(f"{where}: {self.method} cannot carry a body")

        for spec in self.fields:
            if spec.type is FieldType.ENUM:
                if not spec.choices:
                    raise RegistryError(f"{where}: enum field '{spec.name}' has no choices")
                if spec.default is not None and spec.default not in spec.choices:
                    raise RegistryError(f"{where}: default of '{spec.name}' is not a choice")
            if (spec.type is FieldType.FILE) != (spec.location is FieldLocation.FILE):
                raise RegistryError(f"{where}: field '{spec.name}' mixes file and non-file")
            for other in spec.requires:
                if other not in names:
                    raise RegistryError(f"{where}: '{spec.name}' requires unknown field '{other}'")

        self.shape.validate()


def query(name: str, type: FieldType = FieldType.STRING, **kwargs: Any) -> FieldSpec:
    return FieldSpec(name=name, location=FieldLocation.QUERY, type=type, **kwargs)


def body(name: str, type: FieldType = FieldType.STRING, **kwargs: Any) -> FieldSpec:
    return FieldSpec(name=name, location=FieldLocation.BODY, type=type, **kwargs)


def upload(name: str, **kwargs: Any) -> FieldSpec:
    return FieldSpec(name=name, location=FieldLocation.FILE, type=FieldType.FILE, **kwargs)


PAGINATION = (
    query("page", FieldType.INTEGER, default=1, help="Page number"),
    query("per_page", FieldType.INTEGER, default=15, help="Items per page"),
)


def columns(*specs: tuple) -> tuple[Column, ...]:
    """Build columns from ``(path, header[, formatter])`` tuples."""
    return tuple(Column(*spec) for spec in specs)


def list_shape(name: str, cols: Sequence[tuple], *, empty: str, **kwargs: Any) -> ResponseShape:
    return ResponseShape(
        name=name, kind=ShapeKind.LIST, columns=columns(*cols), empty_message=empty, **kwargs
    )


def detail_shape(name: str, cols: Sequence[tuple], **kwargs: Any) -> ResponseShape:
    return ResponseShape(name=name, kind=ShapeKind.DETAIL, columns=columns(*cols), **kwargs)


def message_shape(name: str, message: str, **kwargs: Any) -> ResponseShape:
    return ResponseShape(name=name, kind=ShapeKind.MESSAGE, message=message, **kwargs)


class EndpointRegistry:
    """Immutable ``(noun, verb) -> EndpointDescriptor`` table."""

    def __init__(self, descriptors: Iterable[EndpointDescriptor]):
        table: dict[tuple[str, str], EndpointDescriptor] = {}
        for descriptor in descriptors:
            descriptor.validate()
            if descriptor.key in table:
                raise RegistryError(f"Duplicate command '{descriptor.command}'")
            table[descriptor.key] = descriptor
        self._table = MappingProxyType(table)

    def __iter__(self) -> Iterator[EndpointDescriptor]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)

    def lookup(self, noun: str | Sequence[str], verb: str) -> EndpointDescriptor | None:
        if not isinstance(noun, str):
            noun = " ".join(noun)
        return self._table.get((noun, verb))

    def commands(self) -> list[str]:
        return [descriptor.command for descriptor in self]

    def nouns(self) -> list[str]:
        """Top-level nouns, in declaration order."""
        seen: dict[str, None] = {}
        for descriptor in self:
            seen.setdefault(descriptor.noun[0], None)
        return list(seen)

    def verbs(self, noun: str | Sequence[str]) -> list[str]:
        if not isinstance(noun, str):
            noun = " ".join(noun)
        return [verb for (n, verb) in self._table if n == noun]

    def suggestions(self, command: str, limit: int = 3) -> list[str]:
        candidates = set(self.commands())
        for descriptor in self:
            for depth in range(1, len(descriptor.noun) + 1):
                candidates.add(" ".join(descriptor.noun[:depth]))
        return difflib.get_close_matches(command, sorted(candidates), n=limit, cutoff=0.6)
