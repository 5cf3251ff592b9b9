"""
Core modules for infinispan_client.
"""
from .base_client import AsyncInfinispanClient, SyncInfinispanClient

__all__ = [
    "AsyncInfinispanClient",
    "SyncInfinispanClient",
]
