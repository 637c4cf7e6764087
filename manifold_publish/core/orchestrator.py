"""Publish orchestrator — pushes one content blob to the registry.

Stages run strictly in order, each finishing its round trips before the next
starts:

    namespace -> repository (in namespace) -> artifact (in repository, by
    digest) -> tag (in repository, by name, pointing at the artifact)

Identifiers flow forward through a ``PublishContext``. A failure ends the run
in FAILED with nothing rolled back; resources created by earlier stages stay
valid and are picked up again when the whole publish is re-run, which is the
recovery path. Nothing is retried automatically.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from manifold_publish.bridge.transport import GraphQLExecutor, TransportError
from manifold_publish.core.content_source import ensure_text
from manifold_publish.core.hasher import content_digest
from manifold_publish.core.resolver import (
    ARTIFACT_SPEC,
    NAMESPACE_SPEC,
    REPOSITORY_SPEC,
    ResolutionError,
    ResourceResolver,
)
from manifold_publish.core.stage_machine import PublishStateMachine
from manifold_publish.core.tags import TagUpserter
from manifold_publish.models.publish import (
    ContentDigest,
    PublishContext,
    PublishRequest,
    PublishResult,
    TagAction,
)
from manifold_publish.models.stages import PUBLISH_STAGES, PublishState, StageDefinition

logger = logging.getLogger(__name__)

# (stage_id, message) -> None
ProgressReporter = Callable[[str, str], None]


def _silent(stage_id: str, message: str) -> None:
    return None


class PublishOrchestrator:
    """Sequences the four publish stages and reports one outcome.

    Parameters
    ----------
    transport:
        GraphQL executor bound to the registry endpoint and credentials.
    reporter:
        Called with ``(stage_id, message)`` as each stage progresses.
    """

    def __init__(
        self,
        transport: GraphQLExecutor,
        *,
        reporter: ProgressReporter | None = None,
    ) -> None:
        self.transport = transport
        self.resolver = ResourceResolver(transport)
        self.tags = TagUpserter(transport)
        self._report = reporter or _silent

        self._stage_handlers: dict[
            str, Callable[[PublishRequest, ContentDigest, PublishContext], None]
        ] = {
            "namespace": self._resolve_namespace,
            "repository": self._resolve_repository,
            "artifact": self._resolve_artifact,
            "tag": self._upsert_tag,
        }

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def publish(self, request: PublishRequest) -> PublishResult:
        """Run the whole workflow; never raises for registry or HTTP failures.

        ``TransportError`` and ``ResolutionError`` end the run in FAILED and
        are described in the returned result. Content that cannot be sent
        (not UTF-8) raises ``ContentError`` before any network call.
        """
        ensure_text(request.content)
        digest = content_digest(request.content)
        machine = PublishStateMachine()
        context = PublishContext()

        logger.info(
            "Publishing %s/%s:%s digest=%s size=%d",
            request.namespace,
            request.repository,
            request.tag,
            digest.digest,
            digest.size,
        )

        for definition in PUBLISH_STAGES:
            try:
                self._run_stage(definition, request, digest, context)
            except (TransportError, ResolutionError) as exc:
                machine.fail(definition.stage_id)
                logger.error("Stage %s failed: %s", definition.stage_id, exc)
                payload = exc.payload if isinstance(exc, ResolutionError) else exc.body
                self._report(definition.stage_id, f"Error in {definition.display_name.lower()}: {exc}")
                return self._result(
                    request, digest, context, machine,
                    error=str(exc), error_kind=type(exc).__name__, error_payload=payload,
                )
            machine.transition(definition.reaches, definition.stage_id)

        machine.transition(PublishState.DONE)
        logger.info("Published %s/%s:%s", request.namespace, request.repository, request.tag)
        return self._result(request, digest, context, machine)

    def _run_stage(
        self,
        definition: StageDefinition,
        request: PublishRequest,
        digest: ContentDigest,
        context: PublishContext,
    ) -> None:
        self._report(
            definition.stage_id,
            f"Step {definition.ordinal}: {definition.display_name}...",
        )
        self._stage_handlers[definition.stage_id](request, digest, context)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _resolve_namespace(
        self, request: PublishRequest, digest: ContentDigest, context: PublishContext
    ) -> None:
        resolution = self.resolver.resolve(NAMESPACE_SPEC, {"name": request.namespace})
        if resolution.created:
            self._report("namespace", f"Created namespace: {request.namespace}")
        context.namespace_id = resolution.resource_id
        self._report("namespace", f"Namespace ID: {context.namespace_id}")

    def _resolve_repository(
        self, request: PublishRequest, digest: ContentDigest, context: PublishContext
    ) -> None:
        resolution = self.resolver.resolve(
            REPOSITORY_SPEC,
            {"nsId": context.namespace_id, "name": request.repository},
            {"artifactType": request.artifact_type},
        )
        if resolution.created:
            self._report("repository", f"Created repository: {request.repository}")
        context.repository_id = resolution.resource_id
        self._report("repository", f"Repository ID: {context.repository_id}")

    def _resolve_artifact(
        self, request: PublishRequest, digest: ContentDigest, context: PublishContext
    ) -> None:
        resolution = self.resolver.resolve(
            ARTIFACT_SPEC,
            {"repoId": context.repository_id, "digest": digest.digest},
            {
                "size": digest.size,
                "mediaType": request.media_type,
                "content": ensure_text(request.content),
            },
        )
        context.artifact_id = resolution.resource_id
        context.artifact_reused = not resolution.created
        if context.artifact_reused:
            self._report("artifact", "Artifact already exists with same content")
        self._report("artifact", f"Artifact ID: {context.artifact_id}")

    def _upsert_tag(
        self, request: PublishRequest, digest: ContentDigest, context: PublishContext
    ) -> None:
        upsert = self.tags.upsert(context.repository_id, request.tag, context.artifact_id)
        context.tag_id = upsert.tag_id
        context.tag_action = upsert.action
        verb = "Created" if upsert.action == TagAction.CREATED else "Updated"
        self._report("tag", f"{verb} tag: {request.tag} -> {context.artifact_id}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _result(
        request: PublishRequest,
        digest: ContentDigest,
        context: PublishContext,
        machine: PublishStateMachine,
        *,
        error: str | None = None,
        error_kind: str | None = None,
        error_payload: object = None,
    ) -> PublishResult:
        return PublishResult(
            success=machine.state == PublishState.DONE,
            state=machine.state,
            request_tag=request.tag,
            namespace=request.namespace,
            repository=request.repository,
            digest=digest,
            context=context.model_copy(),
            transitions=machine.history,
            failed_stage=machine.failed_stage,
            error=error,
            error_kind=error_kind,
            error_payload=error_payload,
        )
