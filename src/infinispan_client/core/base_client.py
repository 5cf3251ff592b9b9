"""
Infinispan REST clients using httpx.

Both clients translate a request descriptor, send it, and answer a digest
challenge exactly once. The ``httpx.Response`` is handed back as received:
4xx/5xx statuses are not raised, transport errors are not caught.
"""
import logging
from typing import Optional

import httpx

from ..auth.digest import DigestAuth
from ..config import ClientConfig, ResolvedConfig, resolve_config
from ..console import print_request, print_response
from ..errors import ClientClosedError
from ..request.base import to_pairs
from ..types import HttpRequest, ToHttpRequest

logger = logging.getLogger("infinispan_client.base_client")


def _httpx_timeout(config: ResolvedConfig) -> httpx.Timeout:
    return httpx.Timeout(
        connect=config.timeout.connect,
        read=config.timeout.read,
        write=config.timeout.write,
        pool=config.timeout.connect,
    )


def _prepare(config: ResolvedConfig, request: ToHttpRequest) -> HttpRequest:
    http_req = request.to_http_request(config.base_url, config.context_path)
    if config.headers:
        # case-insensitive: request headers replace defaults of the same name
        merged = {k.lower(): (k, v) for k, v in config.headers.items()}
        merged.update((k.lower(), (k, v)) for k, v in http_req.headers)
        http_req = HttpRequest(
            method=http_req.method,
            url=http_req.url,
            headers=to_pairs(dict(merged.values())),
            body=http_req.body,
        )
    logger.debug(f"run: {http_req.method} {http_req.url}")
    if config.verbose:
        print_request(
            http_req.method,
            http_req.url,
            http_req.headers,
            http_req.body,
            http_req.header("Content-Type"),
        )
    return http_req


def _finish(config: ResolvedConfig, http_req: HttpRequest, response: httpx.Response) -> httpx.Response:
    logger.debug(f"run: {http_req.method} {http_req.url} -> {response.status_code}")
    if config.verbose:
        print_response(
            response.status_code,
            response.reason_phrase or "",
            http_req.url,
            response.headers.multi_items(),
            response.content,
        )
    return response


class AsyncInfinispanClient:
    """Asynchronous Infinispan REST client.

    Holds no per-call state, so one instance can serve concurrent ``run``
    calls. Each call negotiates its own digest challenge.
    """

    def __init__(
        self,
        config: ClientConfig,
        httpx_client: Optional[httpx.AsyncClient] = None,
    ):
        self._config = resolve_config(config)
        if httpx_client is not None:
            self._client = httpx_client
        else:
            self._client = httpx.AsyncClient(
                timeout=_httpx_timeout(self._config),
                verify=self._config.verify_ssl,
            )
        self._closed = False

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _auth(self) -> DigestAuth:
        return DigestAuth(self._config.username, self._config.password)

    async def run(self, request: ToHttpRequest) -> httpx.Response:
        """Execute ``request`` and return the final response."""
        if self._closed:
            raise ClientClosedError("Client has been closed")

        http_req = _prepare(self._config, request)
        response = await self._client.request(
            method=http_req.method,
            url=http_req.url,
            headers=dict(http_req.headers),
            content=http_req.body,
            auth=self._auth(),
        )
        return _finish(self._config, http_req, response)

    async def close(self) -> None:
        """Close the client."""
        self._closed = True
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncInfinispanClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()


class SyncInfinispanClient:
    """Synchronous Infinispan REST client."""

    def __init__(
        self,
        config: ClientConfig,
        httpx_client: Optional[httpx.Client] = None,
    ):
        self._config = resolve_config(config)
        if httpx_client is not None:
            self._client = httpx_client
        else:
            self._client = httpx.Client(
                timeout=_httpx_timeout(self._config),
                verify=self._config.verify_ssl,
            )
        self._closed = False

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _auth(self) -> DigestAuth:
        return DigestAuth(self._config.username, self._config.password)

    def run(self, request: ToHttpRequest) -> httpx.Response:
        """Execute ``request`` and return the final response."""
        if self._closed:
            raise ClientClosedError("Client has been closed")

        http_req = _prepare(self._config, request)
        response = self._client.request(
            method=http_req.method,
            url=http_req.url,
            headers=dict(http_req.headers),
            content=http_req.body,
            auth=self._auth(),
        )
        return _finish(self._config, http_req, response)

    def close(self) -> None:
        """Close the client."""
        self._closed = True
        self._client.close()

    def __enter__(self) -> "SyncInfinispanClient":
        """Enter sync context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit sync context manager."""
        self.close()
