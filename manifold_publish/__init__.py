"""manifold-publish: push personas into the Manifold artifact registry.

Namespace -> repository -> artifact -> tag, each resolved idempotently over
the registry's GraphQL API:
  - Content-addressed artifacts (sha256 digest of the exact payload bytes)
  - Collision-tolerant artifact creation (optimistic create, fallback lookup)
  - Mutable tags, last write wins
  - Env-driven configuration (MANIFOLD_*)
"""

__version__ = "0.1.0"

from manifold_publish.core.orchestrator import PublishOrchestrator
from manifold_publish.cli.app import app as cli

__all__ = ["PublishOrchestrator", "cli", "__version__"]
