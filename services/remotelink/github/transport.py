"""
GraphQL transport over httpx.
"""

from typing import Any, Protocol

import httpx

from remotelink.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"


class GraphQLError(Exception):
    """Raised when a GraphQL response carries an `errors` payload."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        messages = "; ".join(str(e.get("message", e)) for e in errors)
        super().__init__(f"GraphQL request failed: {messages}")


class GraphQLTransport(Protocol):
    async def execute(
        self,
        query: str,
        variables: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Run `query` and return its `data` payload.

        Raises:
            GraphQLError: If the server reported errors.
            httpx.HTTPError: On transport or HTTP status failures.
        """
        ...


class HttpxGraphQLTransport:
    """GraphQLTransport that POSTs to a GraphQL endpoint with httpx."""

    def __init__(
        self,
        endpoint: str = DEFAULT_GITHUB_GRAPHQL_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._client = client

    async def execute(
        self,
        query: str,
        variables: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        request_headers = {"Accept": "application/vnd.github+json"}
        if headers:
            request_headers.update(headers)
        payload = {"query": query, "variables": variables}

        if self._client is not None:
            resp = await self._client.post(
                self._endpoint, json=payload, headers=request_headers, timeout=self._timeout
            )
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(self._endpoint, json=payload, headers=request_headers)

        resp.raise_for_status()
        body = resp.json()
        if body.get("errors"):
            raise GraphQLError(body["errors"])
        return body.get("data") or {}
