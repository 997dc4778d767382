"""API for resolving and publishing IPFS/IPNS names."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from ipfs_api import api
from ipfs_api.encoding import IGNORE, JsonCodec
from ipfs_api.models import ResolveResult

if TYPE_CHECKING:
    from ipfs_api.object import CommittedObject
    from ipfs_api.reference import Reference

logger = logging.getLogger(__name__)

DEFAULT_PUBLISH_LIFETIME = timedelta(hours=24)

_RESOLVE_CODEC = JsonCodec(ResolveResult)


def resolve(path: str, recursive: bool = False) -> str:
    """Resolve an IPFS path.

    Args:
        path: An /ipfs/ or /ipns/ path, or a bare hash.
        recursive: Keep resolving IPNS names until an /ipfs/ path is reached.

    Returns:
        The resolved "/ipfs/<hash>" path, possibly followed by a remaining
        relative tail.
    """
    result = api.get(
        "resolve",
        [("arg", path), ("recursive", api.bool_to_str(recursive))],
        _RESOLVE_CODEC,
    )
    return result.path


def format_lifetime(duration: timedelta) -> str:
    """Format a duration as "<secs>s<nanos>ns".

    Raises:
        ValueError: If the duration is negative.
    """
    if duration < timedelta(0):
        raise ValueError(f"lifetime must not be negative, got {duration}")
    seconds = duration.days * 86400 + duration.seconds
    nanos = duration.microseconds * 1000
    return f"{seconds}s{nanos}ns"


def publish(obj: CommittedObject | Reference) -> None:
    """Publish an object under this node's identity for 24 hours."""
    publish_for(obj, DEFAULT_PUBLISH_LIFETIME)


def publish_for(obj: CommittedObject | Reference, duration: timedelta) -> None:
    """Publish an object under this node's identity.

    Args:
        obj: The object (or a reference to it) to publish.
        duration: How long the record stays valid.
    """
    lifetime = format_lifetime(duration)
    api.post(
        "name/publish",
        [("resolve", "false"), ("lifetime", lifetime), ("arg", obj.hash)],
        IGNORE,
    )
    logger.info("Published %s for %s", obj.hash, lifetime)
