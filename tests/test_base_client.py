"""
Tests for core/base_client.py
Logic testing: Digest handshake, Error propagation, Lifecycle
"""
from unittest.mock import patch

import httpx
import pytest
import respx
from httpx import Response

from infinispan_client.config import ClientConfig
from infinispan_client.core.base_client import AsyncInfinispanClient, SyncInfinispanClient
from infinispan_client.errors import ClientClosedError
from infinispan_client.request import caches, counters, entries

BASE_URL = "http://infinispan.test:11222"
CHALLENGE = {"WWW-Authenticate": 'Digest realm="default", nonce="n1", algorithm=MD5, qop="auth"'}


@pytest.fixture
def config():
    return ClientConfig(base_url=BASE_URL, username="admin", password="secret")


class Recorder:
    """Answers from a fixed list and snapshots each request as it arrives."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.seen = []

    def __call__(self, request):
        self.seen.append((request.method, str(request.url), request.headers.get("authorization"), request.content))
        return self.responses.pop(0)


class TestAsyncRun:
    """Tests for AsyncInfinispanClient.run."""

    # Path: challenge answered exactly once
    @pytest.mark.asyncio
    async def test_challenge_then_success(self, config):
        recorder = Recorder(Response(401, headers=CHALLENGE), Response(200, text="12"))
        router = respx.MockRouter()
        route = router.get(f"{BASE_URL}/rest/v2/counters/hits").mock(side_effect=recorder)
        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))

        async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            response = await client.run(counters.get("hits"))

        assert response.status_code == 200
        assert response.text == "12"
        assert route.call_count == 2
        assert recorder.seen[0][2] is None
        assert recorder.seen[1][2].startswith('Digest username="admin", realm="default", nonce="n1"')

    # Path: body is resent unchanged on the authenticated retry
    @pytest.mark.asyncio
    async def test_body_resent(self, config):
        recorder = Recorder(Response(401, headers=CHALLENGE), Response(204))
        router = respx.MockRouter()
        router.post(f"{BASE_URL}/rest/v2/caches/books/isbn-1").mock(side_effect=recorder)
        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))

        async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            await client.run(entries.create("books", "isbn-1").with_value("Dune").with_ttl(5))

        assert [seen[3] for seen in recorder.seen] == [b"Dune", b"Dune"]

    # Decision: a second 401 is returned, not retried
    @pytest.mark.asyncio
    async def test_second_401_is_final(self, config):
        recorder = Recorder(Response(401, headers=CHALLENGE), Response(401, headers=CHALLENGE))
        router = respx.MockRouter()
        route = router.get(f"{BASE_URL}/rest/v2/caches/").mock(side_effect=recorder)
        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))

        async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            response = await client.run(caches.list())

        assert response.status_code == 401
        assert route.call_count == 2

    # Error Path: 401 without a digest challenge comes back as-is
    @pytest.mark.asyncio
    async def test_non_digest_401(self, config):
        router = respx.MockRouter()
        route = router.get(f"{BASE_URL}/rest/v2/caches/").mock(
            return_value=Response(401, headers={"WWW-Authenticate": 'Basic realm="x"'})
        )
        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))

        async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            response = await client.run(caches.list())

        assert response.status_code == 401
        assert route.call_count == 1

    # Path: no challenge, single call
    @pytest.mark.asyncio
    async def test_no_challenge(self, config):
        router = respx.MockRouter()
        route = router.head(f"{BASE_URL}/rest/v2/caches/books").mock(return_value=Response(404))
        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))

        async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            response = await client.run(caches.exists("books"))

        assert response.status_code == 404
        assert route.call_count == 1

    # Error Path: transport failures propagate unchanged
    @pytest.mark.asyncio
    async def test_transport_error(self, config):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))

        async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            with pytest.raises(httpx.ConnectError):
                await client.run(caches.list())

    # Path: default headers merge under request headers, names compared case-insensitively
    @pytest.mark.asyncio
    @pytest.mark.parametrize("content_type_name", ["Content-Type", "content-type", "CONTENT-TYPE"])
    async def test_default_headers(self, content_type_name):
        config = ClientConfig(
            base_url=BASE_URL,
            username="admin",
            password="secret",
            headers={"X-Trace": "abc", content_type_name: "text/plain"},
        )
        router = respx.MockRouter()
        route = router.post(f"{BASE_URL}/rest/v2/caches/books").mock(return_value=Response(200))
        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))

        async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            await client.run(caches.create_local("books"))

        sent = route.calls.last.request
        assert sent.headers["X-Trace"] == "abc"
        assert sent.headers.get_list("content-type") == ["application/json"]

    # Path: context path from config
    @pytest.mark.asyncio
    async def test_context_path(self):
        config = ClientConfig(base_url=BASE_URL + "/", username="admin", password="secret", context_path="/ispn/rest")
        router = respx.MockRouter()
        route = router.get(f"{BASE_URL}/ispn/rest/v2/counters/").mock(return_value=Response(200, json=[]))
        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))

        async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            await client.run(counters.list())

        assert route.called

    # Error Path: closed client
    @pytest.mark.asyncio
    async def test_run_after_close(self, config):
        client = AsyncInfinispanClient(config, httpx_client=httpx.AsyncClient(transport=httpx.MockTransport(Recorder())))
        await client.close()
        with pytest.raises(ClientClosedError, match="Client has been closed"):
            await client.run(caches.list())

    # Path: verbose traces request and response
    @pytest.mark.asyncio
    async def test_verbose(self):
        config = ClientConfig(base_url=BASE_URL, username="admin", password="secret", verbose=True)
        router = respx.MockRouter()
        router.get(f"{BASE_URL}/rest/v2/caches/").mock(return_value=Response(200, json=["books"]))
        mock_httpx_client = httpx.AsyncClient(transport=httpx.MockTransport(router.async_handler))

        with patch("infinispan_client.core.base_client.print_request") as print_request, patch(
            "infinispan_client.core.base_client.print_response"
        ) as print_response:
            async with AsyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
                await client.run(caches.list())

        print_request.assert_called_once()
        assert print_request.call_args[0][:2] == ("GET", f"{BASE_URL}/rest/v2/caches/")
        print_response.assert_called_once()
        assert print_response.call_args[0][0] == 200

    def test_base_url(self, config):
        client = AsyncInfinispanClient(config, httpx_client=httpx.AsyncClient())
        assert client.base_url == BASE_URL

    # Error Path: invalid config rejected at construction
    def test_invalid_config(self):
        with pytest.raises(ValueError, match="Invalid base_url"):
            AsyncInfinispanClient(ClientConfig(base_url="infinispan:11222", username="a", password="b"))


class TestSyncRun:
    """Tests for SyncInfinispanClient.run."""

    # Path: challenge answered exactly once
    def test_challenge_then_success(self, config):
        recorder = Recorder(Response(401, headers=CHALLENGE), Response(200, text="true"))
        router = respx.MockRouter()
        route = router.post(f"{BASE_URL}/rest/v2/counters/hits?action=compareAndSet&expect=1&update=2").mock(
            side_effect=recorder
        )
        mock_httpx_client = httpx.Client(transport=httpx.MockTransport(router.handler))

        with SyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            response = client.run(counters.compare_and_set("hits", 1, 2))

        assert response.text == "true"
        assert route.call_count == 2
        assert 'uri="/rest/v2/counters/hits?action=compareAndSet&expect=1&update=2"' in recorder.seen[1][2]

    # Error Path: transport failures propagate unchanged
    def test_transport_error(self, config):
        def time_out(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with SyncInfinispanClient(config, httpx_client=httpx.Client(transport=httpx.MockTransport(time_out))) as client:
            with pytest.raises(httpx.ReadTimeout):
                client.run(caches.list())

    # Error Path: closed client
    def test_run_after_close(self, config):
        client = SyncInfinispanClient(config, httpx_client=httpx.Client(transport=httpx.MockTransport(Recorder())))
        client.close()
        with pytest.raises(ClientClosedError):
            client.run(caches.list())

    # Error Path: challenge with an empty parameter value comes back as-is
    @pytest.mark.parametrize(
        "challenge",
        [
            'Digest realm="r", nonce="n1", opaque=',
            'Digest realm=, nonce="n1"',
            'Digest realm="r", nonce="n1", algorithm=SHA-1024',
        ],
    )
    def test_malformed_challenge(self, config, challenge):
        router = respx.MockRouter()
        route = router.get(f"{BASE_URL}/rest/v2/caches/").mock(
            return_value=Response(401, headers={"WWW-Authenticate": challenge})
        )
        mock_httpx_client = httpx.Client(transport=httpx.MockTransport(router.handler))

        with SyncInfinispanClient(config, httpx_client=mock_httpx_client) as client:
            response = client.run(caches.list())

        assert response.status_code == 401
        assert route.call_count == 1
