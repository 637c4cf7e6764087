"""``manifold-publish fetch PERSONA_ID`` — read a published persona back."""

from __future__ import annotations

import typer
from rich.console import Console

from manifold_publish.bridge.router import RegistryReader
from manifold_publish.bridge.transport import TransportError
from manifold_publish.cli.commands._settings import load_settings
from manifold_publish.config import PublishSettings
from manifold_publish.core.content_source import ContentError, validate_persona_id
from manifold_publish.core.hasher import content_digest

console = Console()


def build_reader(settings: PublishSettings) -> RegistryReader:
    return RegistryReader(settings.base_url, timeout=settings.timeout_seconds)


def fetch_cmd(
    persona_id: str = typer.Argument(..., help="Tag name to read (the persona ID)."),
    url: str = typer.Option(None, "--url", help="Registry API URL (or set MANIFOLD_URL)."),
    namespace: str = typer.Option(
        None, "--namespace", "-n", help="Namespace (or set MANIFOLD_NAMESPACE)."
    ),
    repository: str = typer.Option(
        None, "--repository", "-r", help="Repository (or set MANIFOLD_REPOSITORY)."
    ),
    show_digest: bool = typer.Option(
        False, "--digest", help="Print the digest of the fetched content instead of the content."
    ),
) -> None:
    """Fetch the content a tag currently points at."""
    try:
        validate_persona_id(persona_id)
    except ContentError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    settings = load_settings(url=url, namespace=namespace, repository=repository)

    with build_reader(settings) as reader:
        try:
            content = reader.fetch(settings.namespace, settings.repository, persona_id)
        except TransportError as exc:
            console.print(f"[bold red]Fetch failed:[/bold red] {exc}")
            raise typer.Exit(code=1)

    if show_digest:
        digest = content_digest(content)
        console.print(f"{digest.digest} ({digest.size} bytes)")
    else:
        console.out(content.decode("utf-8", errors="replace"), highlight=False)
