"""
Requests on caches: ``/v2/caches/{name}``.

    from infinispan_client.request import caches

    caches.create_local("books")
    caches.create_distributed_sync("sessions")
    caches.size("books")
"""
from typing import Optional

from ..configuration import (
    CacheConfiguration,
    DistributedCache,
    InvalidationCache,
    LocalCache,
    ReplicatedCache,
    cache_config_to_json,
)
from ..errors import InvalidRequestError
from ..types import HttpMethod
from .base import CACHES_PATH, Request, require_name

JSON = "application/json"


def _cache(method: HttpMethod, name: str, action: Optional[str] = None) -> Request:
    req = Request(method=method, resource=CACHES_PATH, names=(require_name(name, "cache name"),))
    if action:
        req = req.with_query("action", action)
    return req


def create(name: str, config: CacheConfiguration) -> Request:
    """Create a cache with the given topology."""
    try:
        body = cache_config_to_json(config)
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"Invalid cache configuration: {e}") from e
    return _cache("POST", name).with_body(body, JSON)


def create_local(name: str) -> Request:
    return create(name, LocalCache())


def create_replicated_sync(name: str) -> Request:
    return create(name, ReplicatedCache.create_sync())


def create_replicated_async(name: str) -> Request:
    return create(name, ReplicatedCache.create_async())


def create_distributed_sync(name: str) -> Request:
    return create(name, DistributedCache.create_sync())


def create_distributed_async(name: str) -> Request:
    return create(name, DistributedCache.create_async())


def create_invalidation_sync(name: str) -> Request:
    return create(name, InvalidationCache.create_sync())


def create_invalidation_async(name: str) -> Request:
    return create(name, InvalidationCache.create_async())


def create_from_template(name: str, template: str) -> Request:
    """Create a cache from a template defined on the server."""
    return _cache("POST", name).with_query("template", require_name(template, "template name"))


def delete(name: str) -> Request:
    return _cache("DELETE", name)


def get(name: str) -> Request:
    """Cache details: stats, size, configuration and flags in one document."""
    return _cache("GET", name)


def get_config(name: str) -> Request:
    return _cache("GET", name, "config")


def exists(name: str) -> Request:
    """HEAD request; 2xx when the cache exists, 404 otherwise."""
    return _cache("HEAD", name)


def list() -> Request:
    """Names of all caches."""
    return Request(method="GET", resource=CACHES_PATH)


def clear(name: str) -> Request:
    return _cache("POST", name, "clear")


def size(name: str) -> Request:
    return _cache("GET", name, "size")


def stats(name: str) -> Request:
    return _cache("GET", name, "stats")


def keys(name: str) -> Request:
    return _cache("GET", name, "keys")
