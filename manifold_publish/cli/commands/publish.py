"""``manifold-publish publish PERSONA_ID`` — push a persona to the registry.

Reads ``<personas-dir>/<persona-id>.json``, then resolves namespace,
repository and artifact and points the tag named after the persona at the
artifact. Exit code 0 on success, 1 on any failure; re-running after a
failure is always safe.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console

from manifold_publish.bridge.transport import GraphQLTransport
from manifold_publish.cli.commands._settings import load_settings
from manifold_publish.config import ConfigurationError, PublishSettings
from manifold_publish.core.content_source import ContentError, PersonaSource
from manifold_publish.core.hasher import content_digest
from manifold_publish.core.orchestrator import PublishOrchestrator
from manifold_publish.models.publish import PublishRequest
from manifold_publish.monitor.renderer import PublishRenderer

console = Console()
logger = logging.getLogger(__name__)


def build_transport(settings: PublishSettings) -> GraphQLTransport:
    """Create the GraphQL transport for *settings* (token must be set)."""
    return GraphQLTransport(
        settings.graphql_url,
        settings.require_token(),
        timeout=settings.timeout_seconds,
    )


def publish_cmd(
    persona_id: str = typer.Argument(
        ...,
        help="The persona ID (e.g. 'orin'); also used as the tag name.",
    ),
    token: str = typer.Option(
        None,
        "--token",
        help="Auth token (or set MANIFOLD_TOKEN).",
    ),
    url: str = typer.Option(
        None,
        "--url",
        help="Registry API URL (or set MANIFOLD_URL).",
    ),
    namespace: str = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace to publish to (or set MANIFOLD_NAMESPACE).",
    ),
    repository: str = typer.Option(
        None,
        "--repository",
        "-r",
        help="Repository inside the namespace (or set MANIFOLD_REPOSITORY).",
    ),
    personas_dir: Path = typer.Option(
        None,
        "--personas-dir",
        "-d",
        help="Directory holding <persona-id>.json files.",
    ),
) -> None:
    """Publish a persona JSON file to the Manifold registry."""
    settings = load_settings(
        token=token,
        url=url,
        namespace=namespace,
        repository=repository,
        personas_dir=personas_dir,
    )

    source = PersonaSource(settings.personas_dir)
    try:
        content = source.load(persona_id)
        transport = build_transport(settings)
    except (ContentError, ConfigurationError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    renderer = PublishRenderer(console=console)
    digest = content_digest(content)
    renderer.print_header(
        persona_id,
        str(source.path_for(persona_id)),
        settings.namespace,
        settings.repository,
        digest.digest,
        digest.size,
    )

    request = PublishRequest(
        namespace=settings.namespace,
        repository=settings.repository,
        tag=persona_id,
        content=content,
        artifact_type=settings.artifact_type,
        media_type=settings.media_type,
    )

    with transport:
        orchestrator = PublishOrchestrator(transport, reporter=renderer.report)
        result = orchestrator.publish(request)

    renderer.print_result(result)
    if not result.success:
        raise typer.Exit(code=1)
