"""
Request-shaping descriptors.

A RequestShape says how a validated argument record becomes an App Store
Connect request: verb, path template, which arguments turn into which
query keys (and how they are serialized), fixed parameters, and an
optional JSON body. ``RequestShape.build`` is the single generic executor
behind every tool.

Serialization rules follow the App Store Connect API:
- list values are comma-joined in input order ("a,b,c"), never repeated keys
- booleans pass through and are rendered by httpx as "true"/"false"
- ``limit`` is capped at 200; absent or non-positive falls back to 100
  where the tool declares a default
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from string import Formatter
from typing import Any
from urllib.parse import quote

from pydantic import BaseModel

DEFAULT_LIMIT = 100
MAX_LIMIT = 200


def joined(values: list[Any]) -> str:
    return ",".join(str(value) for value in values)


def passthrough(value: Any) -> Any:
    return value


def clamp_limit(value: int) -> int:
    if value < 1:
        return DEFAULT_LIMIT
    return min(value, MAX_LIMIT)


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    # Empty strings and lists are treated as "not supplied"; False is a value
    return isinstance(value, (str, list, tuple)) and len(value) == 0


def resolve(arguments: BaseModel, source: str) -> Any:
    """Follow a dotted attribute path, returning None if any hop is None."""
    value: Any = arguments
    for part in source.split("."):
        if value is None:
            return None
        value = getattr(value, part)
    return value


@dataclass(frozen=True)
class QueryParam:
    """
    One optional query parameter.

    Attributes:
        key: Query key on the wire, e.g. "filter[territory]"
        source: Attribute path on the argument record, e.g. "filters.roles"
        serialize: Converts the argument value to its wire form
        default: Sent when the argument is absent; None means omit the key
    """

    key: str
    source: str
    serialize: Callable[[Any], Any] = passthrough
    default: Any = None


@dataclass(frozen=True)
class PreparedRequest:
    """A fully shaped request, ready for ConnectClient.request()."""

    method: str
    path: str
    params: dict[str, Any] = field(default_factory=dict)
    json: dict[str, Any] | None = None


@dataclass(frozen=True)
class RequestShape:
    """
    Static description of how one tool maps onto the REST API.

    Attributes:
        method: HTTP verb
        path: Path template whose ``{placeholders}`` name argument attributes
        query: Optional-argument rules, applied in order
        fixed_params: Parameters sent on every call
        body: Builds the JSON body from the argument record (POST only)
        confirmation: If set, the tool returns this text (formatted with the
                      argument attributes) instead of the response body
    """

    method: str
    path: str
    query: tuple[QueryParam, ...] = ()
    fixed_params: Mapping[str, str] = field(default_factory=dict)
    body: Callable[[Any], dict[str, Any]] | None = None
    confirmation: str | None = None

    def path_fields(self) -> list[str]:
        return [name for _, name, _, _ in Formatter().parse(self.path) if name]

    def build(self, arguments: BaseModel) -> PreparedRequest:
        """Turn a validated argument record into a concrete request."""
        path = self.path.format(
            **{
                name: quote(str(getattr(arguments, name)), safe="")
                for name in self.path_fields()
            }
        )

        params: dict[str, Any] = {}
        for rule in self.query:
            value = resolve(arguments, rule.source)
            if _is_absent(value):
                if rule.default is not None:
                    params[rule.key] = rule.default
                continue
            params[rule.key] = rule.serialize(value)
        params.update(self.fixed_params)

        body = self.body(arguments) if self.body is not None else None
        return PreparedRequest(method=self.method, path=path, params=params, json=body)

    def confirm(self, arguments: BaseModel) -> str:
        """Render the confirmation text for this call."""
        if self.confirmation is None:
            raise ValueError(f"{self.method} {self.path} has no confirmation text")
        return self.confirmation.format(**dict(arguments))
