"""
Request descriptors, one module per resource kind.

    from infinispan_client.request import caches, entries, counters
"""
from . import caches, counters, entries
from .base import CACHES_PATH, COUNTERS_PATH, Request, build_url
from .counters import CreateCounter, IncrementCounter
from .entries import WriteEntry

__all__ = [
    "caches",
    "counters",
    "entries",
    "Request",
    "WriteEntry",
    "CreateCounter",
    "IncrementCounter",
    "build_url",
    "CACHES_PATH",
    "COUNTERS_PATH",
]
