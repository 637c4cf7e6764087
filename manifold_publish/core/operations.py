"""GraphQL documents for the registry's lookup/create pairs.

Lookups filter with ``condition`` and answer ``{nodes: [{rowId ...}]}``;
creates wrap the new row in ``input: {<resource>: {...}}`` and echo back
``rowId``. Identifiers are UUIDs.
"""

from __future__ import annotations

GET_NAMESPACE = """
query GetNamespace($name: String!) {
  namespaces(condition: { name: $name }) {
    nodes { rowId name }
  }
}
"""

CREATE_NAMESPACE = """
mutation CreateNamespace($name: String!) {
  createNamespace(input: { namespace: { name: $name } }) {
    namespace { rowId }
  }
}
"""

GET_REPOSITORY = """
query GetRepository($nsId: UUID!, $name: String!) {
  repositories(condition: { namespaceId: $nsId, name: $name }) {
    nodes { rowId name }
  }
}
"""

CREATE_REPOSITORY = """
mutation CreateRepository($nsId: UUID!, $name: String!, $artifactType: String!) {
  createRepository(
    input: { repository: { namespaceId: $nsId, name: $name, artifactType: $artifactType } }
  ) {
    repository { rowId }
  }
}
"""

GET_ARTIFACT = """
query GetArtifact($repoId: UUID!, $digest: String!) {
  artifacts(condition: { repositoryId: $repoId, digest: $digest }) {
    nodes { rowId }
  }
}
"""

CREATE_ARTIFACT = """
mutation CreateArtifact(
  $repoId: UUID!, $digest: String!, $size: BigInt!, $mediaType: String!, $content: String!
) {
  createArtifact(
    input: {
      artifact: {
        repositoryId: $repoId
        digest: $digest
        size: $size
        mediaType: $mediaType
        content: $content
      }
    }
  ) {
    artifact { rowId digest }
  }
}
"""

GET_TAG = """
query GetTag($repoId: UUID!, $name: String!) {
  tags(condition: { repositoryId: $repoId, name: $name }) {
    nodes { rowId artifactId }
  }
}
"""

UPDATE_TAG = """
mutation UpdateTag($tagId: UUID!, $artifactId: UUID!) {
  updateTag(input: { rowId: $tagId, patch: { artifactId: $artifactId } }) {
    tag { rowId name }
  }
}
"""

CREATE_TAG = """
mutation CreateTag($repoId: UUID!, $artifactId: UUID!, $name: String!) {
  createTag(input: { tag: { repositoryId: $repoId, artifactId: $artifactId, name: $name } }) {
    tag { rowId name }
  }
}
"""
