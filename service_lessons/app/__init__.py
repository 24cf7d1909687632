"""
Lessons Service package for the Lessons Proxy.

This package serves the Sabbath School lesson tree
(language -> quarter -> lesson -> day) from the GitHub contents API,
keeping a Redis copy of every listing it fetches. It provides:

- app.main: API surface for lesson lookups, liveness and health.
- app.resolver: Cache-aside read-through over cache and origin.
- app.models: Lesson paths and validated content results.
- app.cache: Redis-backed storage for origin payloads.
- app.origin: GitHub contents API client.

Guidelines:
- The service is stateless; all state lives in Redis with a TTL.
- Never retry or coalesce origin calls; surface failures as typed errors.
"""
