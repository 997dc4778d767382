"""Request facade over the IPFS HTTP API.

get(), post() and post_data() are parameterized by a codec that decodes
successful bodies. Every call obeys the same error rule: a non-success
response is decoded as the node's JSON error body and raised as RemoteError.

Connections are pooled per thread. set_http_client() installs one shared
httpx.Client instead (tests use it with httpx.MockTransport).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import TypeVar

import httpx

from ipfs_api.config import get_api_endpoint, load_timeout_seconds
from ipfs_api.encoding import Codec, JsonCodec
from ipfs_api.errors import InvalidDataError, RemoteError, TransportError
from ipfs_api.models import ErrorBody

logger = logging.getLogger(__name__)

T = TypeVar("T")

Query = Sequence[tuple[str, str]]

NOT_PINNED = "not pinned"
INVALID_REF = "invalid ipfs ref path"

_ERROR_CODEC = JsonCodec(ErrorBody)

_local = threading.local()
_override_lock = threading.Lock()
_override_client: httpx.Client | None = None


def bool_to_str(value: bool) -> str:
    """Render a boolean the way the node's query parser expects."""
    return "true" if value else "false"


def set_http_client(client: httpx.Client | None) -> httpx.Client | None:
    """Share one httpx.Client across all threads.

    Args:
        client: Client to use for every request, or None to go back to
            per-thread pooled clients.

    Returns:
        The previously installed client, if any. The caller owns it.
    """
    global _override_client
    with _override_lock:
        previous = _override_client
        _override_client = client
    return previous


def _client() -> httpx.Client:
    override = _override_client
    if override is not None:
        return override

    client: httpx.Client | None = getattr(_local, "client", None)
    if client is None:
        client = httpx.Client(timeout=load_timeout_seconds())
        _local.client = client
    return client


def close_thread_client() -> None:
    """Close this thread's pooled client, if one was created."""
    client: httpx.Client | None = getattr(_local, "client", None)
    if client is not None:
        client.close()
        _local.client = None


def _make_url(path: str) -> httpx.URL:
    return get_api_endpoint().join(path)


def _make_params(query: Query, codec: Codec[T]) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    if codec.encoding is not None:
        params.append(("encoding", codec.encoding))
    params.extend(query)
    return params


def _handle_response(response: httpx.Response, path: str, codec: Codec[T]) -> T:
    if response.is_success:
        return codec.parse(response.content)

    error = _ERROR_CODEC.parse(response.content)
    logger.warning(
        "IPFS API %s failed: status=%s code=%s message=%s",
        path,
        response.status_code,
        error.code,
        error.message,
    )
    raise RemoteError(error.message, code=error.code, status_code=response.status_code)


def _send(
    method: str,
    path: str,
    query: Query,
    codec: Codec[T],
    *,
    data: bytes | None = None,
) -> T:
    url = _make_url(path)
    params = _make_params(query, codec)
    logger.debug("IPFS API %s %s params=%s", method, path, params)

    try:
        if data is None:
            response = _client().request(method, url, params=params)
        else:
            response = _client().request(
                method,
                url,
                params=params,
                headers={"Connection": "close"},
                files={"data": ("data", data, "application/octet-stream")},
            )
    except httpx.DecodingError as e:
        raise InvalidDataError(f"undecodable response from {path}: {e}") from e
    except httpx.RequestError as e:
        logger.warning("IPFS API %s %s transport failure: %s", method, path, e)
        raise TransportError(f"request to {path} failed: {e}", cause=e) from e

    return _handle_response(response, path, codec)


def get(path: str, query: Query, codec: Codec[T]) -> T:
    """Send a GET request and decode the response with `codec`.

    Args:
        path: API method path relative to the endpoint (e.g. "object/stat").
        query: Query parameters, in order.
        codec: Decoder for a successful response.

    Raises:
        TransportError: If the request could not be completed.
        RemoteError: If the node responded with a non-success status.
        InvalidDataError: If a response body could not be decoded.
    """
    return _send("GET", path, query, codec)


def post(path: str, query: Query, codec: Codec[T]) -> T:
    """Send a body-less POST request. See get()."""
    return _send("POST", path, query, codec)


def post_data(path: str, query: Query, data: bytes, codec: Codec[T]) -> T:
    """POST `data` as a single multipart part named "data". See get()."""
    return _send("POST", path, query, codec, data=data)
