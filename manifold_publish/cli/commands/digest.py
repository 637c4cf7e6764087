"""``manifold-publish digest PERSONA_ID`` — content address without publishing."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from manifold_publish.cli.commands._settings import load_settings
from manifold_publish.core.content_source import ContentError, PersonaSource
from manifold_publish.core.hasher import content_digest

console = Console()


def digest_cmd(
    persona_id: str = typer.Argument(..., help="The persona ID (e.g. 'orin')."),
    personas_dir: Path = typer.Option(
        None,
        "--personas-dir",
        "-d",
        help="Directory holding <persona-id>.json files.",
    ),
) -> None:
    """Print the digest and size a publish of this persona would use."""
    settings = load_settings(personas_dir=personas_dir)
    try:
        content = PersonaSource(settings.personas_dir).load(persona_id)
    except ContentError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    digest = content_digest(content)
    console.print(f"[bold]Digest:[/bold] {digest.digest}")
    console.print(f"[bold]Size:[/bold]   {digest.size} bytes")
