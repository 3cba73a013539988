"""Driver data model — credentials, result envelopes, and schema tree nodes."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Union

RowValue = Union[None, bool, int, float, str, list["RowValue"], dict[str, "RowValue"]]
Row = dict[str, RowValue]


class TransportProtocol(enum.Enum):
    HTTP = "http"
    HTTPS = "https"


class ContextValue(enum.Enum):
    """Node kinds in the schema tree."""

    CONNECTION = "connection"
    CONNECTED_CONNECTION = "connected_connection"
    RESOURCE_GROUP = "resource_group"
    TABLE = "table"
    VIEW = "view"
    COLUMN = "column"


class DriverError(Exception):
    """Raised for connection, configuration and execution failures."""


class ClickHouseError(DriverError):
    """The server (or the HTTP transport in front of it) rejected a request."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class VerificationError(DriverError):
    """Connectivity self-test failed."""


@dataclass(frozen=True)
class ConnectionCredentials:
    name: str
    host: str = "localhost"
    port: int = 8123
    database: str = "default"
    user: str = "default"
    password: str = ""
    protocol: TransportProtocol = TransportProtocol.HTTP

    @property
    def base_url(self) -> str:
        return f"{self.protocol.value}://{self.host}:{self.port}"

    @classmethod
    def from_params(cls, name: str, params: dict[str, str]) -> ConnectionCredentials:
        """Build credentials from string params (config file or --conn value)."""
        known = {f.name for f in dataclasses.fields(cls)} - {"name"}
        unknown = sorted(set(params) - known)
        if unknown:
            raise DriverError(
                f"Unknown connection param(s): {', '.join(unknown)}. "
                f"Valid: {', '.join(sorted(known))}"
            )

        kwargs: dict[str, object] = dict(params)
        if "port" in params:
            try:
                kwargs["port"] = int(params["port"])
            except ValueError as e:
                raise DriverError(f"Port must be an integer, got '{params['port']}'") from e
        if "protocol" in params:
            try:
                kwargs["protocol"] = TransportProtocol(params["protocol"].lower())
            except ValueError as e:
                valid = ", ".join(p.value for p in TransportProtocol)
                raise DriverError(
                    f"Unknown protocol '{params['protocol']}'. Valid: {valid}"
                ) from e
        return cls(name=name, **kwargs)  # type: ignore[arg-type]


@dataclass(frozen=True)
class ResultEnvelope:
    """Outcome of one query execution.

    When ``error`` is set, ``rows`` and ``cols`` are empty. Otherwise ``cols``
    holds the field names of the first row, in order.
    """

    conn_id: str
    cols: list[str]
    rows: list[Row]
    query: str
    messages: list[str] = field(default_factory=list)
    error: BaseException | None = None
    duration_ms: float | None = None

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class TreeNode:
    type: ContextValue
    label: str
    icon_id: str | None = None
    child_type: ContextValue | None = None
    parent: TreeNode | None = field(default=None, repr=False, compare=False)
    schema: str | None = None
    table: str | None = None
    detail: str | None = None
    fields: Row = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class SearchItem:
    type: ContextValue
    label: str
    fields: Row = field(default_factory=dict)


@dataclass(frozen=True)
class SchemaRef:
    database: str


@dataclass(frozen=True)
class TableRef:
    database: str
    table: str
