"""Publish request, accumulated context, and outcome models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from manifold_publish.models.stages import PublishState, StageTransition


class ContentDigest(BaseModel):
    """Content address of a payload: ``sha256:<hex>`` plus its byte size."""

    model_config = ConfigDict(frozen=True)

    digest: str  # "sha256:<hex>"
    size: int

    @property
    def hex(self) -> str:
        return self.digest.split(":", 1)[1]


class PublishRequest(BaseModel):
    """Everything one publish run needs besides the transport.

    ``tag`` is the caller-chosen name (the persona id); ``content`` is the
    exact byte payload the digest is computed over.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str
    repository: str
    tag: str
    content: bytes
    artifact_type: str = "persona"
    media_type: str = "application/json"


class TagAction(str, Enum):
    """What the tag stage did."""

    CREATED = "created"
    REPOINTED = "repointed"
    UNCHANGED = "unchanged"  # update issued, tag already pointed at the artifact


class PublishContext(BaseModel):
    """Identifiers accumulated stage by stage.

    Each stage reads what earlier stages filled in and adds its own id.
    """

    namespace_id: str | None = None
    repository_id: str | None = None
    artifact_id: str | None = None
    artifact_reused: bool = False
    tag_id: str | None = None
    tag_action: TagAction | None = None


class PublishResult(BaseModel):
    """Single pass/fail outcome of a publish run."""

    model_config = ConfigDict(frozen=True)

    success: bool
    state: PublishState
    request_tag: str
    namespace: str
    repository: str
    digest: ContentDigest
    context: PublishContext
    transitions: list[StageTransition] = []
    failed_stage: str | None = None
    error: str | None = None
    error_kind: str | None = None  # "TransportError" or "ResolutionError"
    error_payload: Any = None
    finished_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def reference(self) -> str:
        """Human-readable ``namespace/repository:tag`` reference."""
        return f"{self.namespace}/{self.repository}:{self.request_tag}"
