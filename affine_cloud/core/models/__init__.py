"""
Shared models.

- domain: enumerations used across the database layer, the server and the client
- io: Pydantic request/response schemas for the REST API
"""
