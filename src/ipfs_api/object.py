"""IPFS objects: drafts, committed objects and links.

An Object is a mutable draft: data bytes plus ordered links. Committing it
sends it to the node and yields a CommittedObject bound to the hash the node
computed. Links always point at References, so children must be committed
before their parent.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, NoReturn

from ipfs_api import api
from ipfs_api.encoding import JsonCodec, ProtobufCodec
from ipfs_api.errors import (
    CommitError,
    InvalidDataError,
    InvalidInputError,
    IpfsApiError,
    NotFoundError,
)
from ipfs_api.merkledag import PBNode, b58decode_hash, b58encode_hash, is_b58_hash
from ipfs_api.models import PutResult, Stat
from ipfs_api.name import resolve
from ipfs_api.reference import Reference
from ipfs_api.stats import stat_object

logger = logging.getLogger(__name__)

_PUT_CODEC = JsonCodec(PutResult)
_NODE_CODEC = ProtobufCodec(PBNode)


@dataclass(frozen=True)
class Link:
    """An IPFS link. See Object.

    Attributes:
        name: Arbitrary UTF-8 text; should be short. Not required to be unique.
        object: The object this link points to.
    """

    name: str
    object: Reference

    def get(self) -> CommittedObject:
        """Get the linked object."""
        return self.object.get()


def _links_size(links: Iterable[Link]) -> int:
    return sum(link.object.size for link in links)


def _traverse(links: Iterable[Link], path: str) -> CommittedObject:
    if path == "":
        raise InvalidInputError("cannot resolve empty path")
    if path.startswith("/"):
        raise InvalidInputError("expected relative path")

    prefix, _, suffix = path.partition("/")
    for link in links:
        if link.name == prefix:
            if not suffix:
                return get(link.object.hash)
            # The node resolves the rest of the path in one go.
            return get(f"{link.object.hash}/{suffix}")
    raise NotFoundError("path lookup failed")


@dataclass
class Object:
    """An IPFS object draft.

    Attributes:
        data: The object's data.
        links: The object's links, in order.
    """

    data: bytes = b""
    links: list[Link] = field(default_factory=list)

    def size(self) -> int:
        """Calculate the (current) size of the object."""
        return len(self.data) + _links_size(self.links)

    def get(self, path: str) -> CommittedObject:
        """Get a child object.

        The first link named after the first path segment wins. Remaining
        segments are resolved by the node, so "a/b/c" is equivalent to
        get("<hash of a>/b/c").

        Raises:
            InvalidInputError: If the path is empty or absolute.
            NotFoundError: If no link has the requested name.
        """
        return _traverse(self.links, path)

    def _to_node(self) -> PBNode:
        node = PBNode()
        for link in self.links:
            # Link hashes come from the node, so a bad one is a bug.
            node.Links.add(
                Hash=b58decode_hash(link.object.hash),
                Name=link.name,
                Tsize=link.object.size,
            )
        node.Data = bytes(self.data)
        return node

    def commit(self) -> CommittedObject:
        """Commit this object to IPFS.

        Returns:
            The committed object. The draft itself is left untouched.

        Raises:
            CommitError: If the node did not store the object. The error
                carries this draft for retry.
            ValueError: If a link holds a hash that is not valid base58.
        """
        payload = self._to_node().SerializeToString()

        try:
            result = api.post_data("object/put", [("inputenc", "protobuf")], payload, _PUT_CODEC)
        except IpfsApiError as e:
            logger.warning(
                "Commit failed (%d links, %d bytes): %s", len(self.links), len(self.data), e
            )
            raise CommitError(e, self) from e

        draft = Object(data=bytes(self.data), links=list(self.links))
        committed = CommittedObject._new(Reference._new(result.hash, draft.size()), draft)
        logger.debug("Committed %s (size=%d)", committed.hash, committed.size)
        return committed


class CommittedObject:
    """An IPFS object that has been committed.

    Exposes the draft's data and links read-only. Two committed objects are
    equal when their references are; a committed object equals a draft with
    the same data and links.
    """

    __slots__ = ("_reference", "_object")

    def __init__(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise TypeError("committed objects are only created by commit or get")

    @classmethod
    def _new(cls, reference: Reference, obj: Object) -> CommittedObject:
        committed = object.__new__(cls)
        committed._reference = reference
        committed._object = obj
        return committed

    @property
    def reference(self) -> Reference:
        """Get a reference to this object."""
        return self._reference

    def into_reference(self) -> Reference:
        """Drop the object body, keeping only its reference."""
        return self._reference

    @property
    def hash(self) -> str:
        """Get the IPFS multihash hash of the object."""
        return self._reference.hash

    @property
    def size(self) -> int:
        """Get the (precomputed) size of the object."""
        return self._reference.size

    @property
    def data(self) -> bytes:
        return self._object.data

    @property
    def links(self) -> tuple[Link, ...]:
        return tuple(self._object.links)

    def get(self, path: str) -> CommittedObject:
        """Get a child object. See Object.get()."""
        return _traverse(self._object.links, path)

    def edit(self) -> Object:
        """Edit the object.

        Returns a fresh draft; committing it yields a new address.
        """
        return Object(data=self._object.data, links=list(self._object.links))

    def stat(self) -> Stat:
        """Stat this object.

        This method does not make any network calls.
        """
        return stat_object(self)

    def pin(self, recursive: bool = True) -> None:
        """Pin this object."""
        self._reference.pin(recursive)

    def unpin(self, recursive: bool = True) -> None:
        """Unpin this object."""
        self._reference.unpin(recursive)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CommittedObject):
            return self._reference == other._reference
        if isinstance(other, Object):
            return self._object == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._reference)

    def __repr__(self) -> str:
        return f"CommittedObject(reference={self._reference!r}, links={len(self._object.links)})"


def get(path: str) -> CommittedObject:
    """Get an object.

    The path is fully resolved first (IPNS names included), so the returned
    object's reference always carries a plain hash.

    Raises:
        InvalidDataError: If the resolved path does not end in a valid hash,
            or the node's response cannot be decoded.
    """
    resolved = resolve(path, recursive=True)

    node = api.get("object/get", [("arg", resolved)], _NODE_CODEC)
    links = [
        Link(name=pb_link.Name, object=Reference._new(b58encode_hash(pb_link.Hash), pb_link.Tsize))
        for pb_link in node.Links
    ]
    obj = Object(data=node.Data, links=links)

    hash_ = resolved.rpartition("/")[2]
    if not is_b58_hash(hash_):
        raise InvalidDataError(f"resolved path does not end in a hash: {resolved}")

    return CommittedObject._new(Reference._new(hash_, obj.size()), obj)
