"""
Cache package for the Lessons Service.

Provides a Redis-backed store that keeps GitHub contents listings under
``github:{canonical-path}`` keys with a fixed TTL, so repeated lesson
lookups skip the origin.
"""
