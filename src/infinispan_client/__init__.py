"""
Client for the Infinispan REST API (v2).

Requests are immutable descriptors built per resource kind; a client turns
them into HTTP and answers the server's digest challenge.

    from infinispan_client import create_client
    from infinispan_client.request import caches, entries

    async with create_client("http://localhost:11222", "admin", "secret") as client:
        await client.run(caches.create_local("books"))
        await client.run(entries.create("books", "isbn-1").with_value("Dune"))
        resp = await client.run(entries.get("books", "isbn-1"))
        assert resp.text == "Dune"
"""
from .types import (
    HttpMethod,
    HttpRequest,
    ToHttpRequest,
)
from .errors import (
    ClientClosedError,
    ConfigurationError,
    InfinispanError,
    InvalidRequestError,
)
from .config import ClientConfig, TimeoutConfig
from .configuration import (
    CacheConfiguration,
    CacheMode,
    CounterConfiguration,
    CounterStorage,
    DistributedCache,
    InvalidationCache,
    LocalCache,
    ReplicatedCache,
    StrongCounter,
    WeakCounter,
    cache_config_from_dict,
    cache_config_from_json,
    cache_config_to_dict,
    cache_config_to_json,
    counter_config_from_dict,
    counter_config_from_json,
    counter_config_to_dict,
    counter_config_to_json,
)
from .request import Request, caches, counters, entries
from .auth.digest import DigestAuth
from .core.base_client import AsyncInfinispanClient, SyncInfinispanClient
from .factory import (
    create_client,
    create_client_from_env,
    create_sync_client,
    create_sync_client_from_env,
)

__all__ = [
    # Types
    "HttpMethod",
    "HttpRequest",
    "ToHttpRequest",
    # Errors
    "ClientClosedError",
    "ConfigurationError",
    "InfinispanError",
    "InvalidRequestError",
    # Config
    "ClientConfig",
    "TimeoutConfig",
    # Topologies and counters
    "CacheConfiguration",
    "CacheMode",
    "CounterConfiguration",
    "CounterStorage",
    "DistributedCache",
    "InvalidationCache",
    "LocalCache",
    "ReplicatedCache",
    "StrongCounter",
    "WeakCounter",
    "cache_config_from_dict",
    "cache_config_from_json",
    "cache_config_to_dict",
    "cache_config_to_json",
    "counter_config_from_dict",
    "counter_config_from_json",
    "counter_config_to_dict",
    "counter_config_to_json",
    # Requests
    "Request",
    "caches",
    "counters",
    "entries",
    # Auth
    "DigestAuth",
    # Clients
    "AsyncInfinispanClient",
    "SyncInfinispanClient",
    # Factory
    "create_client",
    "create_client_from_env",
    "create_sync_client",
    "create_sync_client_from_env",
]

__version__ = "0.1.0"
