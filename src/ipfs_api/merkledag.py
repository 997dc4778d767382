"""Merkle DAG wire schema.

The node speaks the dag-pb protobuf schema:

    message PBLink {
        optional bytes Hash = 1;
        optional string Name = 2;
        optional uint64 Tsize = 3;
    }

    message PBNode {
        optional bytes Data = 1;
        repeated PBLink Links = 2;
    }

Message classes are built from a descriptor at import time, so no generated
module has to be kept in sync with the schema above.

Hashes travel as raw multihash bytes on the wire and as base58 strings
everywhere else; b58encode_hash()/b58decode_hash() convert at that boundary.
"""

from __future__ import annotations

import base58
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_PACKAGE = "merkledag.pb"

_Field = descriptor_pb2.FieldDescriptorProto


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(
        name="merkledag.proto",
        package=_PACKAGE,
        syntax="proto2",
    )

    link = fdp.message_type.add(name="PBLink")
    link.field.add(name="Hash", number=1, type=_Field.TYPE_BYTES, label=_Field.LABEL_OPTIONAL)
    link.field.add(name="Name", number=2, type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL)
    link.field.add(name="Tsize", number=3, type=_Field.TYPE_UINT64, label=_Field.LABEL_OPTIONAL)

    node = fdp.message_type.add(name="PBNode")
    node.field.add(name="Data", number=1, type=_Field.TYPE_BYTES, label=_Field.LABEL_OPTIONAL)
    node.field.add(
        name="Links",
        number=2,
        type=_Field.TYPE_MESSAGE,
        label=_Field.LABEL_REPEATED,
        type_name=f".{_PACKAGE}.PBLink",
    )
    return fdp


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())

PBLink = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{_PACKAGE}.PBLink"))
PBNode = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{_PACKAGE}.PBNode"))


def b58encode_hash(raw: bytes) -> str:
    """Encode a raw multihash as a base58 string."""
    return base58.b58encode(raw).decode("ascii")


def b58decode_hash(value: str) -> bytes:
    """Decode a base58 hash string into raw multihash bytes.

    Raises:
        ValueError: If the string is empty or not valid base58.
    """
    if not value:
        raise ValueError("empty hash")
    return base58.b58decode(value)


def is_multihash(raw: bytes) -> bool:
    """Check the <code><length><digest> framing of a raw multihash."""
    return len(raw) >= 2 and raw[1] == len(raw) - 2


def is_b58_hash(value: str) -> bool:
    """Check whether a string is a base58-encoded multihash."""
    try:
        return is_multihash(b58decode_hash(value))
    except ValueError:
        return False
