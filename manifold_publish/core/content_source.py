"""Local persona files: the bytes a publish run sends.

Storage layout: ``{personas_dir}/{persona_id}.json``. The file is read as raw
bytes and returned untouched so the digest matches what the registry stores.
"""

from __future__ import annotations

import re
from pathlib import Path

_PERSONA_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class ContentError(RuntimeError):
    """Raised when a persona cannot be turned into publishable content."""


def validate_persona_id(persona_id: str) -> str:
    """Return *persona_id* if it is a plain name usable as a file name and tag."""
    if not _PERSONA_ID.match(persona_id):
        raise ContentError(f"Invalid persona id: {persona_id!r}")
    return persona_id


def ensure_text(data: bytes) -> str:
    """Decode *data* as UTF-8; the registry stores artifact content as text."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ContentError(f"Content is not valid UTF-8: {exc}") from exc


class PersonaSource:
    """Reads persona documents from a directory.

    Parameters
    ----------
    personas_dir:
        Directory holding ``<persona_id>.json`` files.
    """

    def __init__(self, personas_dir: Path) -> None:
        self._base = Path(personas_dir)

    def path_for(self, persona_id: str) -> Path:
        """Compute the file path for a persona id."""
        validate_persona_id(persona_id)
        return self._base / f"{persona_id}.json"

    def load(self, persona_id: str) -> bytes:
        """Return the persona file's exact bytes."""
        path = self.path_for(persona_id)
        if not path.is_file():
            raise ContentError(f"Persona file not found: {path}")
        data = path.read_bytes()
        ensure_text(data)
        return data
