"""Error types raised by the gateway.

Startup errors (`ConfigError`, `StoreConnectionError`) are fatal and end the
process. Everything else is raised per request and converted to a plain-text
HTTP 500 at the route boundary.
"""


class GatewayError(Exception):
    """Base class for all gateway errors."""


class ConfigError(GatewayError):
    """Required configuration is missing or invalid."""


class StoreConnectionError(GatewayError):
    """The startup connection to the document store failed."""


class SessionStartError(StoreConnectionError):
    """The client could not be created from the connection URI."""


class PingError(StoreConnectionError):
    """The client was created but the store did not answer the liveness probe."""


class StoreError(GatewayError):
    """A read or write against the document store failed."""


class NotFoundError(StoreError):
    """The collection holds no documents."""


class StoreTimeoutError(StoreError):
    """The request deadline elapsed before the store answered."""


class ParseError(GatewayError):
    """The request body could not be parsed as form data."""
