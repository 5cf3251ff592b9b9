"""
Exceptions raised by infinispan_client.

Transport failures are not wrapped: ``httpx.TransportError`` and its subclasses
reach the caller unchanged. Server statuses are never raised.
"""


class InfinispanError(Exception):
    """Base class for infinispan_client errors."""


class InvalidRequestError(InfinispanError, ValueError):
    """A request descriptor could not be built from the given arguments."""


class ConfigurationError(InfinispanError, ValueError):
    """A cache or counter configuration document could not be decoded."""


class ClientClosedError(InfinispanError, RuntimeError):
    """The client was used after ``close()``."""
