"""Publisher configuration — env-driven via pydantic-settings.

Reads ``MANIFOLD_*`` environment variables and an optional ``.env`` file in
the working directory. CLI flags override individual fields.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when the settings cannot support the requested operation."""


class PublishSettings(BaseSettings):
    """Registry endpoint, credentials, and publish defaults.

    Examples
    --------
    Override via environment::

        export MANIFOLD_URL=https://api.manifold.example
        export MANIFOLD_NAMESPACE=omni
        export MANIFOLD_TOKEN=...

    Or via .env file::

        MANIFOLD_TOKEN=...
        MANIFOLD_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MANIFOLD_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Registry endpoint and credentials
    url: str = "https://api.manifold.omni.dev"
    namespace: str = "omni"
    token: str = ""
    timeout_seconds: float = 30.0

    # Where personas land in the registry
    repository: str = "personas"
    artifact_type: str = "persona"
    media_type: str = "application/json"

    # Local content source
    personas_dir: Path = Path("personas")

    # Observability
    log_level: str = "INFO"

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")

    @property
    def graphql_url(self) -> str:
        """The single endpoint all queries and mutations are POSTed to."""
        return f"{self.base_url}/graphql"

    def require_token(self) -> str:
        """Return the bearer token, failing before any network call if unset."""
        if not self.token:
            raise ConfigurationError(
                "MANIFOLD_TOKEN required (set env var or use --token)"
            )
        return self.token
