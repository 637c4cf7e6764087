"""Tag upsert: move a named pointer onto an artifact.

Tags are the registry's only mutable rows. An existing tag is repointed with
``updateTag``; a missing one is created with ``createTag``. Concurrent
publishes of the same name are last-write-wins. Either mutation must echo the
tag's ``rowId`` back, otherwise the stage fails with ``ResolutionError``.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from manifold_publish.bridge.transport import GraphQLExecutor
from manifold_publish.core import operations
from manifold_publish.core.resolver import ResolutionError, dig
from manifold_publish.models.publish import TagAction

logger = logging.getLogger(__name__)


class TagUpsert(BaseModel):
    model_config = ConfigDict(frozen=True)

    tag_id: str
    action: TagAction
    previous_artifact_id: str | None = None


class TagUpserter:
    """Ensures ``name`` in a repository points at a given artifact."""

    stage_id = "tag"

    def __init__(self, transport: GraphQLExecutor) -> None:
        self._transport = transport

    def upsert(self, repository_id: str, name: str, artifact_id: str) -> TagUpsert:
        lookup = self._transport.execute(
            operations.GET_TAG, {"repoId": repository_id, "name": name}
        )
        node = dig(lookup, "data", "tags", "nodes", 0) or {}
        tag_id = node.get("rowId")

        if tag_id:
            previous = node.get("artifactId")
            previous = None if previous is None else str(previous)
            logger.info("Updating existing tag %s (%s)", name, tag_id)
            payload = self._transport.execute(
                operations.UPDATE_TAG, {"tagId": tag_id, "artifactId": artifact_id}
            )
            confirmed = dig(payload, "data", "updateTag", "tag", "rowId")
            action = TagAction.UNCHANGED if previous == artifact_id else TagAction.REPOINTED
        else:
            previous = None
            logger.info("Creating tag %s", name)
            payload = self._transport.execute(
                operations.CREATE_TAG,
                {"repoId": repository_id, "artifactId": artifact_id, "name": name},
            )
            confirmed = dig(payload, "data", "createTag", "tag", "rowId")
            action = TagAction.CREATED

        if not confirmed:
            logger.error("Tag %s was not confirmed: %s", name, payload)
            raise ResolutionError(self.stage_id, payload)

        return TagUpsert(
            tag_id=str(confirmed),
            action=action,
            previous_artifact_id=previous,
        )
