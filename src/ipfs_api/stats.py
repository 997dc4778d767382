"""Object metadata lookups that do not materialize the object body."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ipfs_api import api
from ipfs_api.encoding import JsonCodec
from ipfs_api.models import Stat
from ipfs_api.reference import Reference

if TYPE_CHECKING:
    from ipfs_api.object import CommittedObject

_STAT_CODEC = JsonCodec(Stat)


def stat(path: str) -> Stat:
    """Lookup object stats."""
    return api.get("object/stat", [("arg", path)], _STAT_CODEC)


def stat_object(obj: CommittedObject) -> Stat:
    """Build a Stat from a committed object without asking the node."""
    return Stat(
        hash=obj.hash,
        num_links=len(obj.links),
        data_size=len(obj.data),
        cumulative_size=obj.size,
    )


def lookup(path: str) -> Reference:
    """Get a reference to an object.

    This is useful when you want to link to an object but don't want to
    materialize it.

    Note: The node will still fetch the object.
    """
    stats = stat(path)
    return Reference._new(stats.hash, stats.cumulative_size)
