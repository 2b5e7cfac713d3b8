"""Error taxonomy for notification endpoint operations.

Every error carries the HTTP status code it maps to, so routers can
translate any ``EndpointError`` into an ``HTTPException`` in one place.
Collaborator failures (database, secret store) are not part
of this hierarchy and propagate unchanged.
"""

from __future__ import annotations


class EndpointError(Exception):
    """Base class for client-facing endpoint errors."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidConfig(EndpointError):
    """Endpoint configuration failed validation."""


class UnknownType(EndpointError):
    """Decoded payload carries an unrecognized ``type`` discriminator."""


class InvalidRequest(EndpointError):
    """Malformed request, e.g. an unsupported update mode."""


class NotFound(EndpointError):
    """Identifier is absent from the store."""

    status_code = 404


class Conflict(EndpointError):
    """Write would break a uniqueness rule (endpoint name per org)."""

    status_code = 409
