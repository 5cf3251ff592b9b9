"""
Type definitions for infinispan_client.
"""
from dataclasses import dataclass
from typing import Literal, Optional, Protocol, Tuple, runtime_checkable

# HTTP methods used by the REST v2 API
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "HEAD"]

# Ordered (name, value) pairs
Pairs = Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class HttpRequest:
    """Wire-level HTTP request produced from a request descriptor."""

    method: HttpMethod
    url: str
    headers: Pairs = ()
    body: Optional[bytes] = None

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


@runtime_checkable
class ToHttpRequest(Protocol):
    """Anything the client can run."""

    def to_http_request(self, base_url: str, context_path: str = "/rest") -> HttpRequest:
        """Translate into an HTTP request against ``base_url``."""
        ...

