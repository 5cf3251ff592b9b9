"""
Cache topology and counter configuration models.

Both families are closed sets of frozen dataclasses joined in a ``Union``.
Each variant maps 1:1 onto the JSON document the server accepts on creation
and returns from its config endpoint, e.g.::

    {"replicated-cache": {"mode": "SYNC"}}
    {"strong-counter": {"initial-value": 10, "storage": "VOLATILE"}}

Decoding ignores attributes the server adds on read-back, so a configuration
fetched from the server compares equal to the one used to create the cache.
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .errors import ConfigurationError


class CacheMode(str, Enum):
    """Synchronization mode of a clustered cache."""

    SYNC = "SYNC"
    ASYNC = "ASYNC"


class CounterStorage(str, Enum):
    """Counter persistence."""

    VOLATILE = "VOLATILE"
    PERSISTENT = "PERSISTENT"


# =============================================================================
# Cache topologies
# =============================================================================


@dataclass(frozen=True)
class LocalCache:
    """Non-clustered cache."""


@dataclass(frozen=True)
class ReplicatedCache:
    """Every node holds every entry."""

    mode: CacheMode = CacheMode.SYNC

    @classmethod
    def create_sync(cls) -> "ReplicatedCache":
        return cls(CacheMode.SYNC)

    @classmethod
    def create_async(cls) -> "ReplicatedCache":
        return cls(CacheMode.ASYNC)


@dataclass(frozen=True)
class DistributedCache:
    """Entries are spread over a subset of owner nodes."""

    mode: CacheMode = CacheMode.SYNC

    @classmethod
    def create_sync(cls) -> "DistributedCache":
        return cls(CacheMode.SYNC)

    @classmethod
    def create_async(cls) -> "DistributedCache":
        return cls(CacheMode.ASYNC)


@dataclass(frozen=True)
class InvalidationCache:
    """Writes invalidate stale copies on other nodes."""

    mode: CacheMode = CacheMode.SYNC

    @classmethod
    def create_sync(cls) -> "InvalidationCache":
        return cls(CacheMode.SYNC)

    @classmethod
    def create_async(cls) -> "InvalidationCache":
        return cls(CacheMode.ASYNC)


CacheConfiguration = Union[LocalCache, ReplicatedCache, DistributedCache, InvalidationCache]

_CACHE_ROOTS = {
    LocalCache: "local-cache",
    ReplicatedCache: "replicated-cache",
    DistributedCache: "distributed-cache",
    InvalidationCache: "invalidation-cache",
}
_CACHE_TYPES = {root: cls for cls, root in _CACHE_ROOTS.items()}


def cache_config_to_dict(config: CacheConfiguration) -> Dict[str, Any]:
    """Encode a cache topology as the server's configuration document."""
    if isinstance(config, LocalCache):
        return {"local-cache": {}}
    if isinstance(config, (ReplicatedCache, DistributedCache, InvalidationCache)):
        return {_CACHE_ROOTS[type(config)]: {"mode": CacheMode(config.mode).value}}
    raise TypeError(f"Not a cache configuration: {config!r}")


def cache_config_from_dict(data: Dict[str, Any]) -> CacheConfiguration:
    """Decode a cache configuration document.

    Raises:
        ConfigurationError: unknown root key, missing or unknown mode.
    """
    root, body = _single_root(data, "cache")
    cls = _CACHE_TYPES.get(root)
    if cls is None:
        raise ConfigurationError(f"Unknown cache topology: {root!r}")
    if cls is LocalCache:
        return LocalCache()

    raw_mode = body.get("mode")
    if raw_mode is None:
        raise ConfigurationError(f"{root} is missing 'mode'")
    try:
        mode = CacheMode(str(raw_mode).upper())
    except ValueError:
        raise ConfigurationError(f"Unknown {root} mode: {raw_mode!r}") from None
    return cls(mode)


# =============================================================================
# Counters
# =============================================================================


@dataclass(frozen=True)
class WeakCounter:
    """Counter optimized for concurrent updates; reads may be stale."""

    initial_value: int = 0
    concurrency_level: Optional[int] = None
    storage: Optional[CounterStorage] = None


@dataclass(frozen=True)
class StrongCounter:
    """Linearizable counter, optionally bounded."""

    initial_value: int = 0
    lower_bound: Optional[int] = None
    upper_bound: Optional[int] = None
    storage: Optional[CounterStorage] = None


CounterConfiguration = Union[WeakCounter, StrongCounter]


def counter_config_to_dict(config: CounterConfiguration) -> Dict[str, Any]:
    """Encode a counter as the server's configuration document.

    Optional attributes that are unset are left out so the server applies
    its own defaults.
    """
    if isinstance(config, WeakCounter):
        root = "weak-counter"
        attrs = {
            "initial-value": config.initial_value,
            "concurrency-level": config.concurrency_level,
        }
    elif isinstance(config, StrongCounter):
        root = "strong-counter"
        attrs = {
            "initial-value": config.initial_value,
            "lower-bound": config.lower_bound,
            "upper-bound": config.upper_bound,
        }
    else:
        raise TypeError(f"Not a counter configuration: {config!r}")

    if config.storage is not None:
        attrs["storage"] = CounterStorage(config.storage).value
    return {root: {k: v for k, v in attrs.items() if v is not None}}


def counter_config_from_dict(data: Dict[str, Any]) -> CounterConfiguration:
    """Decode a counter configuration document."""
    root, body = _single_root(data, "counter")

    storage = body.get("storage")
    if storage is not None:
        try:
            storage = CounterStorage(str(storage).upper())
        except ValueError:
            raise ConfigurationError(f"Unknown counter storage: {storage!r}") from None

    if root == "weak-counter":
        return WeakCounter(
            initial_value=_int_attr(body, "initial-value", 0),
            concurrency_level=_int_attr(body, "concurrency-level"),
            storage=storage,
        )
    if root == "strong-counter":
        return StrongCounter(
            initial_value=_int_attr(body, "initial-value", 0),
            lower_bound=_int_attr(body, "lower-bound"),
            upper_bound=_int_attr(body, "upper-bound"),
            storage=storage,
        )
    raise ConfigurationError(f"Unknown counter type: {root!r}")


# =============================================================================
# JSON helpers
# =============================================================================


def cache_config_to_json(config: CacheConfiguration) -> str:
    return json.dumps(cache_config_to_dict(config))


def cache_config_from_json(text: Union[str, bytes]) -> CacheConfiguration:
    return cache_config_from_dict(_loads(text))


def counter_config_to_json(config: CounterConfiguration) -> str:
    return json.dumps(counter_config_to_dict(config))


def counter_config_from_json(text: Union[str, bytes]) -> CounterConfiguration:
    return counter_config_from_dict(_loads(text))


def _loads(text: Union[str, bytes]) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration JSON: {e}") from e


def _single_root(data: Any, kind: str):
    if not isinstance(data, dict) or len(data) != 1:
        raise ConfigurationError(f"A {kind} configuration must have exactly one root key")
    root, body = next(iter(data.items()))
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ConfigurationError(f"{root} must be an object")
    return root, body


def _int_attr(body: Dict[str, Any], key: str, default: Optional[int] = None) -> Optional[int]:
    value = body.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None
