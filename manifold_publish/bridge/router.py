"""Read-back through the registry's web router.

``GET {base}/@{namespace}/{repository}/{name}`` serves the content the tag
currently points at. Used to confirm what a publish left behind.
"""

from __future__ import annotations

import logging

import httpx

from manifold_publish.bridge.transport import TransportError

logger = logging.getLogger(__name__)


class RegistryReader:
    """Fetches tagged content from the registry without credentials.

    Parameters
    ----------
    base_url:
        Registry root, e.g. ``https://api.manifold.omni.dev``.
    timeout:
        Per-request timeout in seconds.
    transport:
        Optional ``httpx`` transport for tests.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def url_for(self, namespace: str, repository: str, name: str) -> str:
        return f"{self._base_url}/@{namespace}/{repository}/{name}"

    def fetch(self, namespace: str, repository: str, name: str) -> bytes:
        """Return the content bytes a tag points at."""
        url = self.url_for(namespace, repository, name)
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to fetch {url}: {exc}") from exc

        if not response.is_success:
            raise TransportError(
                f"'{name}' not found in {namespace}/{repository} "
                f"(HTTP {response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )

        logger.info("Fetched %s/%s:%s (%d bytes)", namespace, repository, name, len(response.content))
        return response.content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RegistryReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
