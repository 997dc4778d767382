"""Content-addressed references.

A Reference is the only permitted pointer into the store: a (hash, size)
pair. Callers never build one directly; references come from a commit, a
stat/lookup, or a decoded node response. That keeps Reference.get()'s size
check meaningful.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NoReturn

from ipfs_api import api
from ipfs_api.encoding import IGNORE
from ipfs_api.errors import InvalidDataError, RemoteError

if TYPE_CHECKING:
    from ipfs_api.object import CommittedObject

logger = logging.getLogger(__name__)


class Reference:
    """A thin reference to an object.

    str(reference) is the canonical path "/ipfs/<hash>".
    """

    __slots__ = ("_hash", "_size")

    _hash: str
    _size: int

    def __init__(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise TypeError("references are only created by commit, stat, lookup or get")

    @classmethod
    def _new(cls, hash: str, size: int) -> Reference:
        ref = object.__new__(cls)
        object.__setattr__(ref, "_hash", hash)
        object.__setattr__(ref, "_size", size)
        return ref

    def __setattr__(self, name: str, value: Any) -> NoReturn:
        raise AttributeError("Reference is immutable")

    def __reduce__(self) -> tuple[Any, ...]:
        return (Reference._new, (self._hash, self._size))

    @property
    def hash(self) -> str:
        """The base58 multihash of the referenced object."""
        return self._hash

    @property
    def size(self) -> int:
        """The cumulative size of the referenced object."""
        return self._size

    def get(self) -> CommittedObject:
        """Get the referenced object.

        Raises:
            InvalidDataError: If the fetched object's size differs from the
                size carried by this reference.
        """
        from ipfs_api.object import get

        obj = get(self._hash)
        if obj.size != self._size:
            logger.warning(
                "Size mismatch for %s: reference=%d object=%d", self._hash, self._size, obj.size
            )
            raise InvalidDataError("reference and referenced object sizes do not match")
        return obj

    def pin(self, recursive: bool = True) -> None:
        """Pin the referenced object."""
        api.post(
            "pin/add",
            [("recursive", api.bool_to_str(recursive)), ("arg", self._hash)],
            IGNORE,
        )

    def unpin(self, recursive: bool = True) -> None:
        """Unpin the referenced object.

        Unpinning an object that is not pinned succeeds.
        """
        try:
            api.post(
                "pin/rm",
                [("recursive", api.bool_to_str(recursive)), ("arg", self._hash)],
                IGNORE,
            )
        except RemoteError as e:
            if e.message == api.NOT_PINNED:
                logger.debug("unpin %s: already unpinned", self._hash)
                return
            assert e.message != api.INVALID_REF, "sent an invalid ref to the server"
            raise

    def __str__(self) -> str:
        return f"/ipfs/{self._hash}"

    def __repr__(self) -> str:
        return f"Reference(hash={self._hash!r}, size={self._size})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reference):
            return NotImplemented
        return self._hash == other._hash and self._size == other._size

    def __hash__(self) -> int:
        return hash((self._hash, self._size))
