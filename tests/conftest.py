"""Shared test fixtures for manifold-publish.

``FakeRegistry`` implements the registry's GraphQL contract in memory
(unique keys, digest-collision rejection, tag repointing) behind an
``httpx.MockTransport`` so the real ``GraphQLTransport`` is exercised end
to end without network access.
"""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from manifold_publish.bridge.transport import GraphQLTransport
from manifold_publish.core.orchestrator import PublishOrchestrator
from manifold_publish.models.publish import PublishRequest

_OPERATION = re.compile(r"\b(?:query|mutation)\s+(\w+)")

ENDPOINT = "https://registry.test/graphql"
TOKEN = "test-token"


def _conflict(field: str, constraint: str) -> dict[str, Any]:
    return {
        "data": {field: None},
        "errors": [
            {
                "message": f'duplicate key value violates unique constraint "{constraint}"',
                "path": [field],
            }
        ],
    }


class FakeRegistry:
    """In-memory Manifold registry speaking the GraphQL subset we use."""

    def __init__(self) -> None:
        self.namespaces: dict[str, dict[str, Any]] = {}
        self.repositories: dict[str, dict[str, Any]] = {}
        self.artifacts: dict[str, dict[str, Any]] = {}
        self.tags: dict[str, dict[str, Any]] = {}
        self.calls: list[str] = []
        self.requests: list[httpx.Request] = []
        # operation name -> HTTP status to answer with instead of handling
        self.status_overrides: dict[str, int] = {}
        # operation name -> canned JSON body to answer with
        self.body_overrides: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    def add_namespace(self, name: str) -> str:
        row_id = self._new_id()
        self.namespaces[row_id] = {"rowId": row_id, "name": name}
        return row_id

    def add_repository(self, namespace_id: str, name: str, artifact_type: str = "persona") -> str:
        row_id = self._new_id()
        self.repositories[row_id] = {
            "rowId": row_id,
            "namespaceId": namespace_id,
            "name": name,
            "artifactType": artifact_type,
        }
        return row_id

    def add_artifact(self, repository_id: str, digest: str, content: str) -> str:
        row_id = self._new_id()
        self.artifacts[row_id] = {
            "rowId": row_id,
            "repositoryId": repository_id,
            "digest": digest,
            "size": len(content.encode("utf-8")),
            "mediaType": "application/json",
            "content": content,
        }
        return row_id

    # ------------------------------------------------------------------
    # Queries over the tables
    # ------------------------------------------------------------------

    @staticmethod
    def _where(table: dict[str, dict[str, Any]], **condition: Any) -> list[dict[str, Any]]:
        return [
            row for row in table.values()
            if all(row.get(k) == v for k, v in condition.items())
        ]

    def tag_rows(self, name: str) -> list[dict[str, Any]]:
        return self._where(self.tags, name=name)

    def namespace_named(self, name: str) -> dict[str, Any] | None:
        rows = self._where(self.namespaces, name=name)
        return rows[0] if rows else None

    def mutations(self) -> list[str]:
        return [c for c in self.calls if c.startswith(("Create", "Update"))]

    # ------------------------------------------------------------------
    # GraphQL dispatch
    # ------------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            return self._route(request)

        body = json.loads(request.content)
        match = _OPERATION.search(body["query"])
        operation = match.group(1) if match else "anonymous"
        self.calls.append(operation)

        if operation in self.status_overrides:
            return httpx.Response(self.status_overrides[operation], text="upstream unavailable")
        if operation in self.body_overrides:
            return httpx.Response(200, json=self.body_overrides[operation])

        handler = getattr(self, f"_op_{operation}", None)
        if handler is None:
            return httpx.Response(
                200, json={"errors": [{"message": f"Unknown operation {operation}"}]}
            )
        return httpx.Response(200, json=handler(body.get("variables") or {}))

    def _op_GetNamespace(self, v: dict[str, Any]) -> dict[str, Any]:
        nodes = self._where(self.namespaces, name=v["name"])
        return {"data": {"namespaces": {"nodes": nodes}}}

    def _op_CreateNamespace(self, v: dict[str, Any]) -> dict[str, Any]:
        if self._where(self.namespaces, name=v["name"]):
            return _conflict("createNamespace", "namespace_name_key")
        row_id = self.add_namespace(v["name"])
        return {"data": {"createNamespace": {"namespace": {"rowId": row_id}}}}

    def _op_GetRepository(self, v: dict[str, Any]) -> dict[str, Any]:
        nodes = self._where(self.repositories, namespaceId=v["nsId"], name=v["name"])
        return {"data": {"repositories": {"nodes": nodes}}}

    def _op_CreateRepository(self, v: dict[str, Any]) -> dict[str, Any]:
        if self._where(self.repositories, namespaceId=v["nsId"], name=v["name"]):
            return _conflict("createRepository", "repository_namespace_id_name_key")
        row_id = self.add_repository(v["nsId"], v["name"], v["artifactType"])
        return {"data": {"createRepository": {"repository": {"rowId": row_id}}}}

    def _op_GetArtifact(self, v: dict[str, Any]) -> dict[str, Any]:
        nodes = self._where(self.artifacts, repositoryId=v["repoId"], digest=v["digest"])
        return {"data": {"artifacts": {"nodes": nodes}}}

    def _op_CreateArtifact(self, v: dict[str, Any]) -> dict[str, Any]:
        if self._where(self.artifacts, repositoryId=v["repoId"], digest=v["digest"]):
            return _conflict("createArtifact", "artifact_repository_id_digest_key")
        row_id = self.add_artifact(v["repoId"], v["digest"], v["content"])
        self.artifacts[row_id].update(size=v["size"], mediaType=v["mediaType"])
        return {
            "data": {"createArtifact": {"artifact": {"rowId": row_id, "digest": v["digest"]}}}
        }

    def _op_GetTag(self, v: dict[str, Any]) -> dict[str, Any]:
        nodes = self._where(self.tags, repositoryId=v["repoId"], name=v["name"])
        return {"data": {"tags": {"nodes": nodes}}}

    def _op_UpdateTag(self, v: dict[str, Any]) -> dict[str, Any]:
        row = self.tags.get(v["tagId"])
        if row is None:
            return {"data": {"updateTag": None}, "errors": [{"message": "No values were updated"}]}
        row["artifactId"] = v["artifactId"]
        return {"data": {"updateTag": {"tag": {"rowId": row["rowId"], "name": row["name"]}}}}

    def _op_CreateTag(self, v: dict[str, Any]) -> dict[str, Any]:
        if self._where(self.tags, repositoryId=v["repoId"], name=v["name"]):
            return _conflict("createTag", "tag_repository_id_name_key")
        row_id = self._new_id()
        self.tags[row_id] = {
            "rowId": row_id,
            "repositoryId": v["repoId"],
            "artifactId": v["artifactId"],
            "name": v["name"],
        }
        return {"data": {"createTag": {"tag": {"rowId": row_id, "name": v["name"]}}}}

    # ------------------------------------------------------------------
    # Web router
    # ------------------------------------------------------------------

    def _route(self, request: httpx.Request) -> httpx.Response:
        parts = request.url.path.strip("/").split("/")
        if len(parts) != 3 or not parts[0].startswith("@"):
            return httpx.Response(404)
        ns = self.namespace_named(parts[0][1:])
        if ns is None:
            return httpx.Response(404)
        repos = self._where(self.repositories, namespaceId=ns["rowId"], name=parts[1])
        if not repos:
            return httpx.Response(404)
        tags = self._where(self.tags, repositoryId=repos[0]["rowId"], name=parts[2])
        if not tags:
            return httpx.Response(404)
        artifact = self.artifacts[tags[0]["artifactId"]]
        return httpx.Response(200, content=artifact["content"].encode("utf-8"))


@pytest.fixture
def registry() -> FakeRegistry:
    """Provide an empty in-memory registry."""
    return FakeRegistry()


@pytest.fixture
def mock_transport(registry: FakeRegistry) -> httpx.MockTransport:
    return httpx.MockTransport(registry.handle)


@pytest.fixture
def transport(mock_transport: httpx.MockTransport) -> Iterator[GraphQLTransport]:
    """Provide a GraphQLTransport wired to the fake registry."""
    t = GraphQLTransport(ENDPOINT, TOKEN, transport=mock_transport)
    yield t
    t.close()


@pytest.fixture
def orchestrator(transport: GraphQLTransport) -> PublishOrchestrator:
    return PublishOrchestrator(transport)


@pytest.fixture
def personas_dir(tmp_path: Path) -> Path:
    """A personas directory holding ``orin.json`` = ``{"id":"orin"}``."""
    d = tmp_path / "personas"
    d.mkdir()
    (d / "orin.json").write_bytes(b'{"id":"orin"}')
    return d


@pytest.fixture
def make_request() -> Callable[..., PublishRequest]:
    """Factory fixture: build a PublishRequest with the standard defaults."""

    def _factory(content: bytes = b'{"id":"orin"}', **overrides: Any) -> PublishRequest:
        defaults: dict[str, Any] = {
            "namespace": "omni",
            "repository": "personas",
            "tag": "orin",
            "content": content,
        }
        defaults.update(overrides)
        return PublishRequest(**defaults)

    return _factory
