"""GraphQL transport — one authenticated POST per operation.

Bridge boundary
---------------
Everything the publish workflow knows about HTTP lives here. The rest of the
package sees ``execute(query, variables) -> dict`` and ``TransportError``.

A 2xx response that carries a GraphQL ``errors`` array is *not* a transport
failure: the parsed body is returned as-is and the caller decides what the
missing data means. Connection failures, timeouts, non-2xx statuses and
unparseable bodies raise ``TransportError``.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@runtime_checkable
class GraphQLExecutor(Protocol):
    """Anything that can run one GraphQL operation and return the body."""

    def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]: ...


class TransportError(RuntimeError):
    """Raised when the registry cannot be reached or answers outside 2xx."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GraphQLTransport:
    """Executes GraphQL operations against a single endpoint.

    Parameters
    ----------
    endpoint:
        Full GraphQL URL (e.g. ``https://api.manifold.omni.dev/graphql``).
    token:
        Bearer credential sent in the ``Authorization`` header.
    timeout:
        Per-request timeout in seconds. This is the only timeout in the
        publish workflow.
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        endpoint: str,
        token: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._client = httpx.Client(
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Execute
    # ------------------------------------------------------------------

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send one query or mutation and return the parsed response body."""
        body = {"query": query, "variables": variables or {}}
        logger.debug(
            "POST %s variables=%s", self._endpoint, sorted(body["variables"])
        )

        try:
            response = self._client.post(self._endpoint, json=body)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request to {self._endpoint} timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Failed to connect to {self._endpoint}: {exc}"
            ) from exc

        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code} from {self._endpoint}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(
                f"Invalid JSON from {self._endpoint}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        if not isinstance(payload, dict):
            raise TransportError(
                f"Unexpected response shape from {self._endpoint}",
                status_code=response.status_code,
                body=response.text,
            )

        if payload.get("errors"):
            logger.warning(
                "GraphQL errors from %s: %s", self._endpoint, payload["errors"]
            )
        return payload

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GraphQLTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
