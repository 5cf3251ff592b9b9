"""
Requests on cache entries: ``/v2/caches/{cache}/{key}``.

The key follows the cache name directly, with no ``/keys/`` segment, as
the server lays out entry paths.

Values are opaque payloads. ``str`` values are sent UTF-8 encoded as
``text/plain``; ``bytes`` as ``application/octet-stream`` unless a content type
is given explicitly.

    entries.create("books", "isbn-1").with_value("Dune").with_ttl(timedelta(minutes=5))
"""
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union

from ..errors import InvalidRequestError
from ..types import HttpMethod
from .base import CACHES_PATH, Request, require_name

TTL_HEADER = "timeToLiveSeconds"
MAX_IDLE_HEADER = "maxIdleTimeSeconds"

TEXT = "text/plain; charset=UTF-8"
OCTET_STREAM = "application/octet-stream"

Duration = Union[timedelta, int, float]
Value = Union[str, bytes]


def to_seconds(duration: Duration, what: str) -> int:
    """Whole seconds for an expiry header, rounding fractions up."""
    if isinstance(duration, timedelta):
        seconds = duration.total_seconds()
    elif isinstance(duration, (int, float)) and not isinstance(duration, bool):
        seconds = float(duration)
    else:
        raise InvalidRequestError(f"{what} must be a timedelta or a number of seconds")
    if seconds <= 0 or math.isinf(seconds) or math.isnan(seconds):
        raise InvalidRequestError(f"{what} must be positive, got {duration!r}")
    return math.ceil(seconds)


def _default_content_type(value: Value) -> str:
    return TEXT if isinstance(value, str) else OCTET_STREAM


@dataclass(frozen=True)
class WriteEntry(Request):
    """Create (POST) or update (PUT) of an entry, with expiry refinements."""

    def with_value(self, value: Value, content_type: Optional[str] = None) -> "WriteEntry":
        if not isinstance(value, (str, bytes)):
            raise InvalidRequestError(f"entry value must be str or bytes, got {type(value).__name__}")
        return self.with_body(value, content_type or _default_content_type(value))

    def with_content_type(self, content_type: str) -> "WriteEntry":
        if self.body is None:
            raise InvalidRequestError("content type requires a value")
        return self.with_body(self.body, content_type)

    def with_ttl(self, ttl: Optional[Duration]) -> "WriteEntry":
        """Expire the entry ``ttl`` after the write; ``None`` removes the expiry."""
        seconds = None if ttl is None else to_seconds(ttl, "ttl")
        return self.with_header(TTL_HEADER, seconds)

    def with_max_idle(self, max_idle: Optional[Duration]) -> "WriteEntry":
        """Expire the entry after ``max_idle`` without access."""
        seconds = None if max_idle is None else to_seconds(max_idle, "max idle")
        return self.with_header(MAX_IDLE_HEADER, seconds)


def _names(cache: str, key: str):
    return (require_name(cache, "cache name"), require_name(key, "entry key"))


def _entry(method: HttpMethod, cache: str, key: str) -> Request:
    return Request(method=method, resource=CACHES_PATH, names=_names(cache, key))


def create(cache: str, key: str) -> WriteEntry:
    """Create an entry; without ``with_value`` the entry is stored empty."""
    return WriteEntry(method="POST", resource=CACHES_PATH, names=_names(cache, key))


def get(cache: str, key: str) -> Request:
    return _entry("GET", cache, key)


def exists(cache: str, key: str) -> Request:
    return _entry("HEAD", cache, key)


def update(cache: str, key: str, value: Value) -> WriteEntry:
    """Replace the value of an entry (PUT)."""
    return WriteEntry(method="PUT", resource=CACHES_PATH, names=_names(cache, key)).with_value(value)


def delete(cache: str, key: str) -> Request:
    return _entry("DELETE", cache, key)
