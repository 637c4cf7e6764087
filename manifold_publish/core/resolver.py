"""Generic get-or-create over the registry's lookup/create pairs.

One ``ResourceResolver`` serves every resource level; what differs per level
is captured in a ``ResourceSpec``:

- *query first* (namespace, repository): look up by natural key, create only
  when nothing matches.
- *create first* (artifact): the key is a content digest and new content is
  the common case, so create optimistically and fall back to a lookup when
  the registry refuses the duplicate. Two publishers racing on identical
  content both end up with the same artifact id.

When a create comes back without an identifier and ``recover_conflicts`` is
set, the lookup is repeated once before the stage is declared failed. A
failed stage raises ``ResolutionError`` carrying the registry's raw response.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from manifold_publish.bridge.transport import GraphQLExecutor
from manifold_publish.core import operations

logger = logging.getLogger(__name__)


class ResolutionError(RuntimeError):
    """Raised when the registry rejects a stage and no match can be found.

    ``payload`` is the registry's response, unmodified, for diagnosis.
    """

    def __init__(self, stage: str, payload: Any) -> None:
        super().__init__(f"Error resolving {stage}")
        self.stage = stage
        self.payload = payload


def dig(payload: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists; return None as soon as a step is missing."""
    current = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[step] if isinstance(step, int) else current.get(step)
        if current is None:
            return None
    return current


class ResourceSpec(BaseModel):
    """How to look up and create one kind of registry resource.

    ``lookup_field`` names the connection under ``data`` whose ``nodes`` hold
    matches; ``create_field``/``create_node`` locate the created row under
    ``data``.
    """

    model_config = ConfigDict(frozen=True)

    stage_id: str
    lookup_query: str
    create_mutation: str
    lookup_field: str
    create_field: str
    create_node: str
    create_first: bool = False
    recover_conflicts: bool = True


class Resolution(BaseModel):
    """Identifier of the resolved resource and whether this call created it."""

    model_config = ConfigDict(frozen=True)

    stage_id: str
    resource_id: str
    created: bool


NAMESPACE_SPEC = ResourceSpec(
    stage_id="namespace",
    lookup_query=operations.GET_NAMESPACE,
    create_mutation=operations.CREATE_NAMESPACE,
    lookup_field="namespaces",
    create_field="createNamespace",
    create_node="namespace",
)

REPOSITORY_SPEC = ResourceSpec(
    stage_id="repository",
    lookup_query=operations.GET_REPOSITORY,
    create_mutation=operations.CREATE_REPOSITORY,
    lookup_field="repositories",
    create_field="createRepository",
    create_node="repository",
)

ARTIFACT_SPEC = ResourceSpec(
    stage_id="artifact",
    lookup_query=operations.GET_ARTIFACT,
    create_mutation=operations.CREATE_ARTIFACT,
    lookup_field="artifacts",
    create_field="createArtifact",
    create_node="artifact",
    create_first=True,
)


class ResourceResolver:
    """Resolves registry resources by natural key, creating them if absent.

    Parameters
    ----------
    transport:
        Anything with ``execute(query, variables) -> dict``.
    """

    def __init__(self, transport: GraphQLExecutor) -> None:
        self._transport = transport

    def lookup(self, spec: ResourceSpec, key: dict[str, Any]) -> str | None:
        """Return the ``rowId`` of the first node matching *key*, if any."""
        payload = self._transport.execute(spec.lookup_query, key)
        return dig(payload, "data", spec.lookup_field, "nodes", 0, "rowId")

    def resolve(
        self,
        spec: ResourceSpec,
        key: dict[str, Any],
        create_fields: dict[str, Any] | None = None,
    ) -> Resolution:
        """Get-or-create the resource identified by *key*.

        *key* holds the scope and natural key (the lookup variables);
        *create_fields* adds what only the create mutation takes.
        """
        if not spec.create_first:
            existing = self.lookup(spec, key)
            if existing:
                logger.info("%s: found existing %s", spec.stage_id, existing)
                return Resolution(stage_id=spec.stage_id, resource_id=str(existing), created=False)

        variables = {**key, **(create_fields or {})}
        payload = self._transport.execute(spec.create_mutation, variables)
        created = dig(payload, "data", spec.create_field, spec.create_node, "rowId")
        if created:
            logger.info("%s: created %s", spec.stage_id, created)
            return Resolution(stage_id=spec.stage_id, resource_id=str(created), created=True)

        if spec.create_first or spec.recover_conflicts:
            logger.warning(
                "%s: create returned no id, checking for an existing match", spec.stage_id
            )
            existing = self.lookup(spec, key)
            if existing:
                logger.info("%s: reusing existing %s", spec.stage_id, existing)
                return Resolution(stage_id=spec.stage_id, resource_id=str(existing), created=False)

        logger.error("%s: registry rejected create: %s", spec.stage_id, payload)
        raise ResolutionError(spec.stage_id, payload)
