"""Settings resolution shared by the subcommands: env first, flags on top."""

from __future__ import annotations

from typing import Any

from manifold_publish.config import PublishSettings


def load_settings(**overrides: Any) -> PublishSettings:
    """Build settings from the environment, applying non-None CLI overrides."""
    settings = PublishSettings()
    update = {k: v for k, v in overrides.items() if v is not None}
    if update:
        settings = settings.model_copy(update=update)
    return settings
