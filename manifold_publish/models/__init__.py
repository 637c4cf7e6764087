"""manifold-publish data models — Pydantic v2, frozen where they describe facts."""

from manifold_publish.models.publish import (
    ContentDigest,
    PublishContext,
    PublishRequest,
    PublishResult,
    TagAction,
)
from manifold_publish.models.stages import (
    PUBLISH_STAGES,
    STAGES_BY_ID,
    VALID_TRANSITIONS,
    PublishState,
    StageDefinition,
    StageTransition,
)

__all__ = [
    # stages
    "PublishState",
    "StageDefinition",
    "StageTransition",
    "VALID_TRANSITIONS",
    "PUBLISH_STAGES",
    "STAGES_BY_ID",
    # publish
    "ContentDigest",
    "PublishRequest",
    "PublishContext",
    "PublishResult",
    "TagAction",
]
