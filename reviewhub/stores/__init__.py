"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: DB session, directory read queries, ORM operations
- Redis: caching with TTL policies

No business/ranking logic in stores - that belongs in services.
"""
