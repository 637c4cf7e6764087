"""Content addressing for publish payloads.

The digest is taken over the exact bytes that are later sent as artifact
content, so the registry's digest-uniqueness key deduplicates byte-identical
payloads and nothing else.
"""

from __future__ import annotations

import hashlib

from manifold_publish.models.publish import ContentDigest

DIGEST_ALGORITHM = "sha256"


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def content_address(data: bytes) -> str:
    """Return the ``sha256:<hex>`` address of raw bytes."""
    return f"{DIGEST_ALGORITHM}:{sha256_hex(data)}"


def content_digest(data: bytes) -> ContentDigest:
    """Digest and byte size of a payload. Pure and deterministic."""
    return ContentDigest(digest=content_address(data), size=len(data))
