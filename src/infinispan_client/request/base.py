"""
Immutable request descriptors and their translation to HTTP.
"""
import logging
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple, TypeVar, Union
from urllib.parse import quote, urlencode

from ..errors import InvalidRequestError
from ..types import HttpMethod, HttpRequest, Pairs

logger = logging.getLogger("infinispan_client.request")

CACHES_PATH = "/v2/caches"
COUNTERS_PATH = "/v2/counters"

R = TypeVar("R", bound="Request")


def require_name(value: object, what: str) -> str:
    """Return ``value`` if it is a usable resource name, else raise."""
    if not isinstance(value, str):
        raise InvalidRequestError(f"{what} must be a string, got {type(value).__name__}")
    if not value.strip():
        raise InvalidRequestError(f"{what} must not be empty")
    return value


def to_pairs(values: Optional[Mapping[str, object]]) -> Pairs:
    """Freeze a mapping into sorted (name, value) string pairs."""
    if not values:
        return ()
    return tuple(sorted((str(k), str(v)) for k, v in values.items()))


def build_url(
    base_url: str,
    path: str,
    query: Pairs = (),
) -> str:
    """Build full URL from base and an already-escaped path."""
    url = base_url.rstrip("/") + path
    if query:
        url = f"{url}?{urlencode(query)}"
    return url


@dataclass(frozen=True)
class Request:
    """A fully specified REST call, prior to translation.

    ``resource`` is the fixed resource-kind segment (``/v2/caches``), ``names``
    the unescaped name segments that follow it (cache name, entry key) and
    ``suffix`` an optional trailing segment. ``query`` and ``headers`` are kept
    sorted so equal descriptors always translate to identical requests.

    Refinements never mutate: each returns a new descriptor.
    """

    method: HttpMethod
    resource: str
    names: Tuple[str, ...] = ()
    suffix: str = ""
    query: Pairs = ()
    headers: Pairs = ()
    body: Optional[bytes] = None
    content_type: Optional[str] = None

    @property
    def path(self) -> str:
        """Escaped path below the REST context path."""
        if not self.names:
            return self.resource + "/" + self.suffix.lstrip("/")
        escaped = "/".join(quote(name, safe="") for name in self.names)
        return f"{self.resource}/{escaped}{self.suffix}"

    def with_query(self: R, name: str, value: Optional[object]) -> R:
        """Set or, with ``None``, remove a query parameter."""
        return replace(self, query=_set_pair(self.query, name, value))

    def with_header(self: R, name: str, value: Optional[object]) -> R:
        """Set or, with ``None``, remove a header."""
        return replace(self, headers=_set_pair(self.headers, name, value))

    def with_body(self: R, body: Optional[Union[str, bytes]], content_type: Optional[str]) -> R:
        if isinstance(body, str):
            body = body.encode("utf-8")
        return replace(self, body=body, content_type=content_type if body is not None else None)

    def to_http_request(self, base_url: str, context_path: str = "/rest") -> HttpRequest:
        """Translate into a wire-level request against ``base_url``."""
        url = build_url(base_url, context_path.rstrip("/") + self.path, self.query)
        headers = dict(self.headers)
        if self.body is not None and self.content_type:
            headers["Content-Type"] = self.content_type
        http_req = HttpRequest(
            method=self.method,
            url=url,
            headers=tuple(sorted(headers.items())),
            body=self.body,
        )
        logger.debug(f"to_http_request: {self.method} {url}")
        return http_req


def _set_pair(pairs: Pairs, name: str, value: Optional[object]) -> Pairs:
    kept = [(k, v) for k, v in pairs if k != name]
    if value is not None:
        kept.append((name, str(value)))
    return tuple(sorted(kept))
