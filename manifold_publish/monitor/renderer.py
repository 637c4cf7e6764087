"""Rich terminal renderer for publish runs.

Color scheme
------------
- cyan      : stage headers
- green     : success summary
- yellow    : reused artifact / unchanged tag
- bold red  : failure
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from manifold_publish.models.publish import PublishResult, TagAction
from manifold_publish.models.stages import STAGES_BY_ID


class PublishRenderer:
    """Renders publish progress and outcomes.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def print_header(
        self,
        persona_id: str,
        source: str,
        namespace: str,
        repository: str,
        digest: str,
        size: int,
    ) -> None:
        self.console.print(f"[bold]Publishing persona:[/bold] {persona_id}")
        self.console.print(f"  File: {source}")
        self.console.print(f"  Namespace: {namespace}")
        self.console.print(f"  Repository: {repository}")
        self.console.print(f"  Digest: {digest}")
        self.console.print(f"  Size: {size} bytes")
        self.console.print()

    def report(self, stage_id: str, message: str) -> None:
        """Progress callback for ``PublishOrchestrator``."""
        definition = STAGES_BY_ID.get(stage_id)
        if definition and message.startswith(f"Step {definition.ordinal}:"):
            self.console.print(f"[bold cyan]{message}[/bold cyan]")
        elif message.startswith("Error"):
            self.console.print(f"  [bold red]{message}[/bold red]")
        elif message.startswith("Artifact already exists"):
            self.console.print(f"  [yellow]{message}[/yellow]")
        else:
            self.console.print(f"  {message}")

    # ------------------------------------------------------------------
    # Outcome
    # ------------------------------------------------------------------

    def render_result(self, result: PublishResult) -> Panel:
        """Summary panel on success, error panel with the raw payload on failure."""
        if result.success:
            return self._render_success(result)
        return self._render_failure(result)

    def print_result(self, result: PublishResult) -> None:
        self.console.print()
        self.console.print(self.render_result(result))

    def _render_success(self, result: PublishResult) -> Panel:
        ctx = result.context
        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        table.add_row("Reference", result.reference)
        table.add_row("Digest", result.digest.digest)
        table.add_row("Size", f"{result.digest.size} bytes")
        table.add_row("Namespace ID", ctx.namespace_id or "-")
        table.add_row("Repository ID", ctx.repository_id or "-")

        artifact = ctx.artifact_id or "-"
        if ctx.artifact_reused:
            artifact += " [yellow](reused)[/yellow]"
        table.add_row("Artifact ID", artifact)

        tag = ctx.tag_id or "-"
        if ctx.tag_action is not None:
            style = "yellow" if ctx.tag_action == TagAction.UNCHANGED else "green"
            tag += f" [{style}]({ctx.tag_action.value})[/{style}]"
        table.add_row("Tag ID", tag)

        return Panel(
            Group(
                Text.from_markup(
                    f"[bold green]Successfully published {result.request_tag} "
                    f"to {result.reference}[/bold green]"
                ),
                Text(""),
                table,
            ),
            title="[bold]Publish[/bold]",
            border_style="green",
            padding=(1, 2),
        )

    def _render_failure(self, result: PublishResult) -> Panel:
        stage = STAGES_BY_ID.get(result.failed_stage or "")
        stage_name = stage.display_name if stage else (result.failed_stage or "unknown")
        message = result.error or ""
        if result.error_kind:
            message = f"{result.error_kind}: {message}"
        parts: list[Any] = [
            Text.from_markup(f"[bold red]Publish failed at: {stage_name}[/bold red]"),
            Text(message),
        ]
        if result.error_payload is not None:
            parts.append(Text(""))
            parts.append(Syntax(format_payload(result.error_payload), "json", word_wrap=True))

        return Panel(
            Group(*parts),
            title=f"[bold]Publish {result.reference}[/bold]",
            border_style="red",
            padding=(1, 2),
        )


def format_payload(payload: Any) -> str:
    """Pretty-print a raw registry payload; non-JSON text is passed through."""
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError:
            return payload
    return json.dumps(payload, indent=2, sort_keys=True, default=str)
