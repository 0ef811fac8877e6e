"""
AFFiNE Cloud Server Package.

This package contains the web server implementation of AFFiNE Cloud.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Server configuration and constants.
    exception_handlers: Mapping of errors onto JSON responses.
    middleware: Request logging middleware.
    services: Business logic and service layer.
    templates: Jinja2 mail templates.
"""
