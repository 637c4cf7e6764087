"""HTTP boundary between the publish workflow and the Manifold registry.

Modules
-------
transport
    ``GraphQLTransport`` POSTs one query or mutation per call to the
    registry's GraphQL endpoint with a bearer token. Raises
    ``TransportError`` for HTTP-level failures only; GraphQL error envelopes
    are returned to the caller as data.
router
    ``RegistryReader`` reads tagged content back through the registry's web
    router.
"""
