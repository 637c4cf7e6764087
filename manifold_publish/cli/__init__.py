"""manifold-publish CLI — Typer-based command-line interface.

Provides the ``manifold-publish`` command with subcommands for publishing a
persona, computing its digest offline, and reading it back from the
registry.

All output uses Rich for formatted terminal display.
"""
