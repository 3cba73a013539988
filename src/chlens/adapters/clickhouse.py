"""ClickHouse HTTP transport — one POST per statement, JSON rows back."""

from __future__ import annotations

import json

import httpx

from chlens.adapters._base import ClickHouseError, ConnectionCredentials, Row

_EXCEPTION_CODE_HEADER = "X-ClickHouse-Exception-Code"


def _parse_exception_code(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class ClickHouseClient:
    """Async client for the ClickHouse HTTP interface.

    Requests are independent of each other; the only state is the httpx
    connection pool, released by ``aclose()``.
    """

    def __init__(
        self,
        credentials: ConnectionCredentials,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.credentials = credentials
        self._http = httpx.AsyncClient(
            base_url=credentials.base_url,
            headers={
                "X-ClickHouse-User": credentials.user,
                "X-ClickHouse-Key": credentials.password,
            },
            transport=transport,
            timeout=timeout,
        )

    async def execute(self, sql: str, *, settings: dict[str, str] | None = None) -> list[Row]:
        params: dict[str, str] = {
            "database": self.credentials.database,
            "default_format": "JSON",
            "output_format_json_quote_64bit_integers": "0",
        }
        if settings:
            params.update(settings)

        try:
            response = await self._http.post("/", params=params, content=sql.encode())
        except httpx.HTTPError as e:
            raise ClickHouseError(f"ClickHouse request failed: {e}") from e

        if response.status_code != 200:
            raise ClickHouseError(
                response.text.strip(),
                code=_parse_exception_code(response.headers.get(_EXCEPTION_CODE_HEADER)),
            )

        body = response.text
        if not body.strip():
            # DDL, INSERT and other statements without a result set.
            return []
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise ClickHouseError(f"ClickHouse returned a non-JSON response: {e}") from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise ClickHouseError("ClickHouse response has no 'data' array")
        return data

    async def aclose(self) -> None:
        await self._http.aclose()
