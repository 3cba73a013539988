"""Driver data model and the ClickHouse transport."""

from chlens.adapters._base import (
    ClickHouseError,
    ConnectionCredentials,
    ContextValue,
    DriverError,
    ResultEnvelope,
    Row,
    RowValue,
    SchemaRef,
    SearchItem,
    TableRef,
    TransportProtocol,
    TreeNode,
    VerificationError,
)

__all__ = [
    "ClickHouseError",
    "ConnectionCredentials",
    "ContextValue",
    "DriverError",
    "ResultEnvelope",
    "Row",
    "RowValue",
    "SchemaRef",
    "SearchItem",
    "TableRef",
    "TransportProtocol",
    "TreeNode",
    "VerificationError",
]
