"""AFFiNE Cloud.

Python implementation of the AFFiNE cloud surface: a FastAPI server for
authentication, server configuration, subscriptions and shared docs, and a
client package that consumes it the way the AFFiNE web app does.

Subpackages
-----------

- ``affine_cloud.core``: configuration-independent building blocks shared by
  both sides (logging, monitoring, the error taxonomy, the database layer and
  the I/O models).
- ``affine_cloud.server``: the FastAPI application, its services and routes.
- ``affine_cloud.client``: fetch provider, server registry, subscription
  store, share reader and the all-pages view state.
"""
