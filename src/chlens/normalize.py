"""Result normalization — every execution outcome becomes one ResultEnvelope."""

from __future__ import annotations

from chlens.adapters._base import ResultEnvelope, Row


def resolve_query_results(
    rows: list[Row] | None,
    query: str,
    *,
    conn_id: str,
    duration_ms: float | None = None,
) -> ResultEnvelope:
    """Wrap a successful row sequence. Columns come from the first row's keys."""
    rows = list(rows or [])
    cols = list(rows[0].keys()) if rows else []
    return ResultEnvelope(
        conn_id=conn_id,
        cols=cols,
        rows=rows,
        query=query,
        messages=[],
        duration_ms=duration_ms,
    )


def resolve_error(
    error: BaseException,
    query: str,
    *,
    conn_id: str,
    duration_ms: float | None = None,
) -> ResultEnvelope:
    """Wrap a failed execution. The error text becomes the only message, if any."""
    message = str(error)
    return ResultEnvelope(
        conn_id=conn_id,
        cols=[],
        rows=[],
        query=query,
        messages=[message] if message else [],
        error=error,
        duration_ms=duration_ms,
    )
