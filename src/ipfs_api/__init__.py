"""Client library for the IPFS HTTP API merkle-DAG object model.

Build drafts, commit them, fetch and traverse committed objects, pin them and
publish them through a node's HTTP API.

Environment Variables:
    IPFS_API_URL: API endpoint (default: http://127.0.0.1:5001/api/v0/)
    IPFS_API_TIMEOUT_SECONDS: Request timeout (default: 60)
"""

from ipfs_api.api import set_http_client
from ipfs_api.config import get_api_endpoint, reset_api_endpoint, set_api_endpoint
from ipfs_api.errors import (
    CommitError,
    ConfigError,
    InvalidDataError,
    InvalidInputError,
    IpfsApiError,
    NotFoundError,
    RemoteError,
    TransportError,
)
from ipfs_api.models import Stat
from ipfs_api.name import publish, publish_for, resolve
from ipfs_api.object import CommittedObject, Link, Object, get
from ipfs_api.reference import Reference
from ipfs_api.stats import lookup, stat

__all__ = [
    "CommitError",
    "CommittedObject",
    "ConfigError",
    "InvalidDataError",
    "InvalidInputError",
    "IpfsApiError",
    "Link",
    "NotFoundError",
    "Object",
    "Reference",
    "RemoteError",
    "Stat",
    "TransportError",
    "get",
    "get_api_endpoint",
    "lookup",
    "publish",
    "publish_for",
    "reset_api_endpoint",
    "resolve",
    "set_api_endpoint",
    "set_http_client",
    "stat",
]
