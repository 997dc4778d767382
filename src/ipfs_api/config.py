"""Endpoint configuration for the IPFS HTTP API.

One process-wide endpoint is shared by every call. Readers take a snapshot at
call entry; set_api_endpoint() swaps it atomically.

Environment Variables:
    IPFS_API_URL: Initial endpoint (default: http://127.0.0.1:5001/api/v0/)
    IPFS_API_TIMEOUT_SECONDS: Per-request timeout for pooled clients
        (default: 60)
"""

from __future__ import annotations

import logging
import os
import threading

import httpx

from ipfs_api.errors import ConfigError

logger = logging.getLogger(__name__)

IPFS_API_URL_ENV = "IPFS_API_URL"
IPFS_API_TIMEOUT_ENV = "IPFS_API_TIMEOUT_SECONDS"

API_VERSION = "v0"
DEFAULT_API_ENDPOINT = f"http://127.0.0.1:5001/api/{API_VERSION}/"
DEFAULT_TIMEOUT_SECONDS = 60.0


def _normalize_endpoint(url: str | httpx.URL) -> httpx.URL:
    """Validate an endpoint and make sure it ends with a slash.

    Request paths are joined relative to the endpoint, so without the trailing
    slash "api/v0" would lose its last segment.

    Raises:
        ConfigError: If the URL is not an absolute http(s) URL.
    """
    try:
        parsed = httpx.URL(str(url))
    except httpx.InvalidURL as e:
        raise ConfigError(f"Invalid IPFS API endpoint '{url}': {e}") from e

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigError(f"IPFS API endpoint must be an absolute http(s) URL, got '{url}'")

    if not parsed.path.endswith("/"):
        parsed = parsed.copy_with(path=parsed.path + "/")
    return parsed


def _load_endpoint_from_env() -> httpx.URL:
    raw = os.environ.get(IPFS_API_URL_ENV, "").strip()
    return _normalize_endpoint(raw or DEFAULT_API_ENDPOINT)


def load_timeout_seconds() -> float:
    """Read the request timeout from the environment.

    Raises:
        ConfigError: If the value is set but not a positive number.
    """
    raw = os.environ.get(IPFS_API_TIMEOUT_ENV)
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT_SECONDS

    raw = raw.strip()
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{IPFS_API_TIMEOUT_ENV} must be a positive number, got '{raw}'") from e

    if value <= 0:
        raise ConfigError(f"{IPFS_API_TIMEOUT_ENV} must be a positive number, got {value}")
    return value


_endpoint_lock = threading.Lock()
_endpoint: httpx.URL | None = None


def set_api_endpoint(url: str | httpx.URL) -> None:
    """Set the IPFS API endpoint for every subsequent call.

    Args:
        url: Absolute http(s) URL of the API root, e.g. http://host:5001/api/v0/.

    Raises:
        ConfigError: If the URL is invalid.
    """
    global _endpoint
    normalized = _normalize_endpoint(url)
    with _endpoint_lock:
        _endpoint = normalized
    logger.info("IPFS API endpoint set to %s", normalized)


def get_api_endpoint() -> httpx.URL:
    """Get the IPFS API endpoint currently in effect."""
    global _endpoint
    with _endpoint_lock:
        if _endpoint is None:
            _endpoint = _load_endpoint_from_env()
        return _endpoint


def reset_api_endpoint() -> None:
    """Forget any endpoint set at runtime; the next read re-reads IPFS_API_URL."""
    global _endpoint
    with _endpoint_lock:
        _endpoint = None
