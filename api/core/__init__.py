"""
Shared building blocks used by every feature package: the connection pool,
environment settings, the error taxonomy and the object store client.

Feature-specific SQL and business logic live in the feature packages
(`identity/`, `trips/`, `moments/`, `uploads/`).
"""
