"""Pytest configuration and fixtures for ipfs_api tests.

The fake_node fixture serves an in-memory IPFS node through
httpx.MockTransport, so every test runs without a live daemon.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from typing import Any

import httpx
import pytest
from google.protobuf.message import DecodeError

from ipfs_api.api import set_http_client
from ipfs_api.config import reset_api_endpoint, set_api_endpoint
from ipfs_api.merkledag import PBNode, b58decode_hash, b58encode_hash

TEST_ENDPOINT = "http://ipfs.test:5001/api/v0/"
API_PREFIX = "/api/v0/"

_SHA2_256_PREFIX = bytes([0x12, 0x20])


def multihash(payload: bytes) -> str:
    """sha2-256 multihash of a payload, base58 encoded ("Qm...")."""
    return b58encode_hash(_SHA2_256_PREFIX + hashlib.sha256(payload).digest())


def _error(message: str, status_code: int = 500) -> httpx.Response:
    return httpx.Response(status_code, json={"Message": message, "Code": 0, "Type": "error"})


def _multipart_part(request: httpx.Request, name: str) -> bytes | None:
    content_type = request.headers.get("content-type", "")
    _, sep, boundary = content_type.partition("boundary=")
    if not sep:
        return None
    for chunk in request.content.split(b"--" + boundary.encode("ascii")):
        head, sep, payload = chunk.partition(b"\r\n\r\n")
        if sep and f'name="{name}"'.encode() in head:
            return payload[:-2]
    return None


class FakeIpfsNode:
    """In-memory stand-in for the subset of the IPFS HTTP API the library uses.

    Objects are addressed by the sha2-256 multihash of their serialized node.
    Cumulative size is len(Data) + sum(Tsize), the same rule the client uses.
    """

    def __init__(self) -> None:
        self.blocks: dict[str, PBNode] = {}
        self.pins: set[str] = set()
        self.names: dict[str, str] = {}
        self.peer_id = multihash(b"fake-peer-identity")
        self.requests: list[httpx.Request] = []
        self.overrides: dict[str, tuple[int, dict[str, Any]]] = {}

    def add(self, data: bytes = b"", links: list[tuple[str, str]] | None = None) -> str:
        """Store a node directly, bypassing the API. Returns its hash."""
        node = PBNode(Data=data)
        for name, hash_ in links or []:
            node.Links.add(
                Hash=b58decode_hash(hash_), Name=name, Tsize=self.cumulative_size(hash_)
            )
        return self._store(node)

    def _store(self, node: PBNode) -> str:
        hash_ = multihash(node.SerializeToString())
        self.blocks[hash_] = node
        return hash_

    def cumulative_size(self, hash_: str) -> int:
        node = self.blocks[hash_]
        return len(node.Data) + sum(link.Tsize for link in node.Links)

    def last_request(self, method_path: str) -> httpx.Request:
        for request in reversed(self.requests):
            if request.url.path == API_PREFIX + method_path:
                return request
        raise AssertionError(f"no request to {method_path}")

    def _resolve(self, path: str) -> str | None:
        if path.startswith("/ipns/"):
            name, _, rest = path[len("/ipns/") :].partition("/")
            target = self.names.get(name)
            if target is None:
                return None
            path = f"{target}/{rest}" if rest else target
        if path.startswith("/ipfs/"):
            path = path[len("/ipfs/") :]

        parts = [s for s in path.split("/") if s]
        if not parts:
            return None
        root, *segments = parts
        if root not in self.blocks:
            return None
        current = root
        for segment in segments:
            for link in self.blocks[current].Links:
                if link.Name == segment:
                    current = b58encode_hash(link.Hash)
                    break
            else:
                return None
            if current not in self.blocks:
                return None
        return current

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method_path = request.url.path.removeprefix(API_PREFIX)
        if method_path in self.overrides:
            status_code, body = self.overrides[method_path]
            return httpx.Response(status_code, json=body)

        handler = getattr(self, "_api_" + method_path.replace("/", "_"), None)
        if handler is None:
            return _error(f"unknown command: {method_path}", status_code=404)
        response: httpx.Response = handler(request)
        return response

    def _api_resolve(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        resolved = self._resolve(params["arg"])
        if resolved is None:
            return _error("merkledag: not found")
        return httpx.Response(200, json={"Path": f"/ipfs/{resolved}"})

    def _api_object_get(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        resolved = self._resolve(params["arg"])
        if resolved is None:
            return _error("merkledag: not found")
        return httpx.Response(200, content=self.blocks[resolved].SerializeToString())

    def _api_object_stat(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        resolved = self._resolve(params["arg"])
        if resolved is None:
            return _error("merkledag: not found")
        node = self.blocks[resolved]
        body: dict[str, Any] = {
            "Hash": resolved,
            "NumLinks": len(node.Links),
            "BlockSize": len(node.SerializeToString()),
            "LinksSize": 0,
            "DataSize": len(node.Data),
            "CumulativeSize": self.cumulative_size(resolved),
        }
        return httpx.Response(200, json=body)

    def _api_object_put(self, request: httpx.Request) -> httpx.Response:
        payload = _multipart_part(request, "data")
        if payload is None:
            return _error("file argument 'data' is required", status_code=400)
        node = PBNode()
        try:
            node.ParseFromString(payload)
        except DecodeError:
            return _error("failed to decode protobuf")
        hash_ = self._store(node)
        return httpx.Response(200, json={"Hash": hash_, "Links": []})

    def _pin_target(self, params: httpx.QueryParams) -> tuple[str | None, httpx.Response | None]:
        arg = params["arg"]
        try:
            b58decode_hash(arg)
        except ValueError:
            return None, _error("invalid ipfs ref path")
        if arg not in self.blocks:
            return None, _error("merkledag: not found")
        return arg, None

    def _api_pin_add(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        target, failure = self._pin_target(params)
        if failure is not None:
            return failure
        assert target is not None
        self.pins.add(target)
        return httpx.Response(200, json={"Pins": [target]})

    def _api_pin_rm(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        target, failure = self._pin_target(params)
        if failure is not None:
            return failure
        if target not in self.pins:
            return _error("not pinned")
        self.pins.discard(target)
        return httpx.Response(200, json={"Pins": [target]})

    def _api_name_publish(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        arg = params["arg"]
        if arg not in self.blocks:
            return _error("merkledag: not found")
        self.names[self.peer_id] = arg
        return httpx.Response(200, json={"Name": self.peer_id, "Value": f"/ipfs/{arg}"})


@pytest.fixture
def fake_node() -> Iterator[FakeIpfsNode]:
    """Point the library at a fresh in-memory node."""
    node = FakeIpfsNode()
    client = httpx.Client(transport=httpx.MockTransport(node.handle))
    previous = set_http_client(client)
    set_api_endpoint(TEST_ENDPOINT)
    try:
        yield node
    finally:
        set_http_client(previous)
        client.close()
        reset_api_endpoint()


@pytest.fixture
def mock_api() -> Iterator[Any]:
    """Install a custom MockTransport handler.

    Usage: mock_api(handler) where handler(request) -> httpx.Response.
    """
    clients: list[httpx.Client] = []
    previous = set_http_client(None)
    set_api_endpoint(TEST_ENDPOINT)

    def install(handler: Any) -> None:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        set_http_client(client)

    try:
        yield install
    finally:
        set_http_client(previous)
        for client in clients:
            client.close()
        reset_api_endpoint()
