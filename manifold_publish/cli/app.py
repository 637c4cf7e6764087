"""Main Typer application — imports and registers all CLI commands.

Entry point: ``manifold-publish`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from manifold_publish.cli.commands.digest import digest_cmd
from manifold_publish.cli.commands.fetch import fetch_cmd
from manifold_publish.cli.commands.publish import publish_cmd
from manifold_publish.config import PublishSettings

app = typer.Typer(
    name="manifold-publish",
    help="Publish personas to the Manifold artifact registry.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="publish", help="Publish a persona to the registry.")(publish_cmd)
app.command(name="digest", help="Show a persona's content digest.")(digest_cmd)
app.command(name="fetch", help="Read a published persona back.")(fetch_cmd)


def configure_logging(level: str) -> None:
    """Route log records through Rich at *level* (e.g. ``"INFO"``)."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (or set MANIFOLD_LOG_LEVEL).",
    ),
) -> None:
    """Publish personas to the Manifold artifact registry."""
    configure_logging(log_level or PublishSettings().log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
