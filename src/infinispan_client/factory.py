"""
Factory functions for creating Infinispan clients.
"""
from typing import Dict, Optional, Union

import httpx

from .config import ClientConfig, TimeoutConfig
from .core.base_client import AsyncInfinispanClient, SyncInfinispanClient


def create_client(
    base_url: str,
    username: str,
    password: str,
    *,
    timeout: Union[TimeoutConfig, float, None] = None,
    context_path: str = "/rest",
    verify_ssl: bool = True,
    headers: Optional[Dict[str, str]] = None,
    verbose: bool = False,
    httpx_client: Optional[httpx.AsyncClient] = None,
) -> AsyncInfinispanClient:
    """
    Create an async client.

    Example:
        client = create_client("http://localhost:11222", "admin", "secret")
        resp = await client.run(caches.list())
    """
    config = ClientConfig(
        base_url=base_url,
        username=username,
        password=password,
        timeout=timeout,
        context_path=context_path,
        verify_ssl=verify_ssl,
        headers=headers or {},
        verbose=verbose,
    )
    return AsyncInfinispanClient(config, httpx_client=httpx_client)


def create_sync_client(
    base_url: str,
    username: str,
    password: str,
    *,
    timeout: Union[TimeoutConfig, float, None] = None,
    context_path: str = "/rest",
    verify_ssl: bool = True,
    headers: Optional[Dict[str, str]] = None,
    verbose: bool = False,
    httpx_client: Optional[httpx.Client] = None,
) -> SyncInfinispanClient:
    """Create a sync client."""
    config = ClientConfig(
        base_url=base_url,
        username=username,
        password=password,
        timeout=timeout,
        context_path=context_path,
        verify_ssl=verify_ssl,
        headers=headers or {},
        verbose=verbose,
    )
    return SyncInfinispanClient(config, httpx_client=httpx_client)


def create_client_from_env(**overrides) -> AsyncInfinispanClient:
    """Async client configured from ``INFINISPAN_*`` environment variables."""
    return AsyncInfinispanClient(ClientConfig.from_env(**overrides))


def create_sync_client_from_env(**overrides) -> SyncInfinispanClient:
    """Sync client configured from ``INFINISPAN_*`` environment variables."""
    return SyncInfinispanClient(ClientConfig.from_env(**overrides))
