"""Unit tests for the database layer in affine_cloud/core/database.

Repositories and helpers run against an in-memory SQLite database, so no
external database service is needed.
"""
