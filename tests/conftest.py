"""
Shared fixtures for infinispan_client tests.
"""
import hashlib
import json
from typing import Dict, List
from urllib.parse import unquote
from urllib.request import parse_http_list, parse_keqv_list

import httpx
import pytest

from infinispan_client.config import ClientConfig

BASE_URL = "http://infinispan.test:11222"
USERNAME = "admin"
PASSWORD = "secret"
REALM = "default"


def _md5(*parts: str) -> str:
    return hashlib.md5(":".join(parts).encode("utf-8")).hexdigest()


class FakeInfinispan:
    """In-memory stand-in for the REST endpoint.

    Every request must carry a valid MD5 digest ``Authorization`` header for
    the current nonce; anything else gets a challenge. Only the operations the
    tests drive are modelled.
    """

    def __init__(self, username: str = USERNAME, password: str = PASSWORD):
        self.username = username
        self.password = password
        self.nonce_counter = 0
        self.nonce = ""
        self.requests: List[httpx.Request] = []
        self.counters: Dict[str, int] = {}
        self.counter_configs: Dict[str, dict] = {}
        self.caches: Dict[str, dict] = {}
        self.entries: Dict[str, Dict[str, bytes]] = {}

    # -- digest -------------------------------------------------------------

    def _challenge(self) -> httpx.Response:
        self.nonce_counter += 1
        self.nonce = f"nonce-{self.nonce_counter}"
        header = f'Digest realm="{REALM}", nonce="{self.nonce}", opaque="op4que", algorithm=MD5, qop="auth"'
        return httpx.Response(401, headers={"WWW-Authenticate": header})

    def _authorized(self, request: httpx.Request) -> bool:
        value = request.headers.get("authorization", "")
        scheme, _, params = value.partition(" ")
        if scheme != "Digest":
            return False
        fields = parse_keqv_list(parse_http_list(params))
        if fields.get("nonce") != self.nonce or fields.get("username") != self.username:
            return False
        if fields.get("opaque") != "op4que":
            return False
        ha1 = _md5(self.username, REALM, self.password)
        ha2 = _md5(request.method, fields["uri"])
        expected = _md5(ha1, self.nonce, fields["nc"], fields["cnonce"], fields["qop"], ha2)
        return fields.get("response") == expected and fields["uri"] == request.url.raw_path.decode()

    # -- routing ------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._authorized(request):
            return self._challenge()

        segments = [unquote(s) for s in request.url.raw_path.split(b"?")[0].decode().split("/")]
        # ['', 'rest', 'v2', kind, name?, key?]
        kind = segments[3]
        rest = [s for s in segments[4:] if s]
        params = request.url.params
        if kind == "counters":
            return self._counters(request, rest, params)
        if kind == "caches":
            return self._caches(request, rest, params)
        return httpx.Response(404)

    def _counters(self, request, rest, params) -> httpx.Response:
        if not rest:
            return httpx.Response(200, json=sorted(self.counters))
        name = rest[0]
        if len(rest) == 2 and rest[1] == "config":
            if name not in self.counters:
                return httpx.Response(404)
            return httpx.Response(200, json=self.counter_configs[name])

        action = params.get("action")
        if request.method == "POST" and action is None:
            if name in self.counters:
                return httpx.Response(409)
            config = json.loads(request.content)
            (body,) = config.values()
            self.counters[name] = body.get("initial-value", 0)
            self.counter_configs[name] = config
            return httpx.Response(200)
        if name not in self.counters:
            return httpx.Response(404)
        if request.method == "GET":
            return httpx.Response(200, text=str(self.counters[name]))
        if request.method == "DELETE":
            del self.counters[name]
            return httpx.Response(204)
        if action == "increment":
            self.counters[name] += 1
        elif action == "decrement":
            self.counters[name] -= 1
        elif action == "add":
            self.counters[name] += int(params["delta"])
        elif action == "reset":
            (body,) = self.counter_configs[name].values()
            self.counters[name] = body.get("initial-value", 0)
        elif action in ("compareAndSet", "compareAndSwap"):
            current = self.counters[name]
            if current == int(params["expect"]):
                self.counters[name] = int(params["update"])
            if action == "compareAndSet":
                return httpx.Response(200, text="true" if current == int(params["expect"]) else "false")
            return httpx.Response(200, text=str(current))
        else:
            return httpx.Response(400)
        return httpx.Response(200, text=str(self.counters[name]))

    def _caches(self, request, rest, params) -> httpx.Response:
        if not rest:
            return httpx.Response(200, json=sorted(self.caches))
        name = rest[0]
        if len(rest) == 2:
            key = rest[1]
            store = self.entries.get(name)
            if store is None:
                return httpx.Response(404)
            if request.method in ("POST", "PUT"):
                store[key] = request.content
                return httpx.Response(204)
            if key not in store:
                return httpx.Response(404)
            if request.method == "DELETE":
                del store[key]
                return httpx.Response(204)
            return httpx.Response(200, content=store[key] if request.method == "GET" else b"")

        action = params.get("action")
        if request.method == "POST" and action is None:
            self.caches[name] = json.loads(request.content)
            self.entries[name] = {}
            return httpx.Response(200)
        if name not in self.caches:
            return httpx.Response(404)
        if action == "config":
            # The server returns the full configuration, not only what was sent
            (root, body) = next(iter(self.caches[name].items()))
            full = dict(body, statistics=True, encoding={"media-type": "application/x-protostream"})
            return httpx.Response(200, json={root: full})
        if action == "size":
            return httpx.Response(200, text=str(len(self.entries[name])))
        if action == "clear":
            self.entries[name].clear()
            return httpx.Response(204)
        if action == "keys":
            return httpx.Response(200, json=sorted(self.entries[name]))
        if request.method == "DELETE":
            del self.caches[name]
            del self.entries[name]
            return httpx.Response(204)
        return httpx.Response(200, json={"configuration": self.caches[name], "stats": {}})


@pytest.fixture
def client_config():
    """ClientConfig pointing at the fake server."""
    return ClientConfig(base_url=BASE_URL, username=USERNAME, password=PASSWORD)


@pytest.fixture
def fake_server():
    return FakeInfinispan()


@pytest.fixture
def fake_async_httpx(fake_server):
    """httpx.AsyncClient wired to the fake server."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_server.handler))


@pytest.fixture
def fake_sync_httpx(fake_server):
    """httpx.Client wired to the fake server."""
    return httpx.Client(transport=httpx.MockTransport(fake_server.handler))
