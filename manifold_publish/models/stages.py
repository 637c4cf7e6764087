"""Publish state machine models: strictly linear, one absorbing failure."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class PublishState(str, Enum):
    """Where a publish run currently stands."""

    START = "start"
    NAMESPACE_RESOLVED = "namespace_resolved"
    REPOSITORY_RESOLVED = "repository_resolved"
    ARTIFACT_RESOLVED = "artifact_resolved"
    TAG_UPSERTED = "tag_upserted"
    DONE = "done"
    FAILED = "failed"


# Forward-only transitions. DONE and FAILED are terminal.
VALID_TRANSITIONS: dict[PublishState, set[PublishState]] = {
    PublishState.START: {PublishState.NAMESPACE_RESOLVED, PublishState.FAILED},
    PublishState.NAMESPACE_RESOLVED: {PublishState.REPOSITORY_RESOLVED, PublishState.FAILED},
    PublishState.REPOSITORY_RESOLVED: {PublishState.ARTIFACT_RESOLVED, PublishState.FAILED},
    PublishState.ARTIFACT_RESOLVED: {PublishState.TAG_UPSERTED, PublishState.FAILED},
    PublishState.TAG_UPSERTED: {PublishState.DONE, PublishState.FAILED},
    PublishState.DONE: set(),
    PublishState.FAILED: set(),
}


class StageDefinition(BaseModel):
    """One of the four publish stages and the state it leads to."""

    model_config = ConfigDict(frozen=True)

    stage_id: str
    display_name: str
    ordinal: int
    reaches: PublishState


class StageTransition(BaseModel):
    """Records a single state transition for the run narrative."""

    model_config = ConfigDict(frozen=True)

    from_state: PublishState
    to_state: PublishState
    stage_id: str | None = None


PUBLISH_STAGES: list[StageDefinition] = [
    StageDefinition(
        stage_id="namespace",
        display_name="Ensure namespace",
        ordinal=1,
        reaches=PublishState.NAMESPACE_RESOLVED,
    ),
    StageDefinition(
        stage_id="repository",
        display_name="Ensure repository",
        ordinal=2,
        reaches=PublishState.REPOSITORY_RESOLVED,
    ),
    StageDefinition(
        stage_id="artifact",
        display_name="Create artifact",
        ordinal=3,
        reaches=PublishState.ARTIFACT_RESOLVED,
    ),
    StageDefinition(
        stage_id="tag",
        display_name="Create/update tag",
        ordinal=4,
        reaches=PublishState.TAG_UPSERTED,
    ),
]

STAGES_BY_ID: dict[str, StageDefinition] = {s.stage_id: s for s in PUBLISH_STAGES}
