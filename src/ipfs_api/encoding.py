"""Response body codecs.

Each codec advertises the `encoding` query value the node expects (or None)
and turns a response body into a value. Decoding failures surface as
InvalidDataError.
"""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar

from google.protobuf.message import DecodeError
from google.protobuf.message import Message as ProtoMessage
from pydantic import BaseModel, ValidationError

from ipfs_api.errors import InvalidDataError

T_co = TypeVar("T_co", covariant=True)
M = TypeVar("M", bound=BaseModel)
P = TypeVar("P", bound=ProtoMessage)


class Codec(Protocol[T_co]):
    """Decoding strategy for a response body."""

    @property
    def encoding(self) -> str | None:
        """Value for the `encoding` query parameter, if any."""
        ...

    def parse(self, body: bytes) -> T_co:
        """Decode a response body."""
        ...


class IgnoreCodec:
    """Drop the body entirely."""

    encoding: str | None = None

    def parse(self, body: bytes) -> None:
        return None


class JsonCodec(Generic[M]):
    """Decode a JSON body into a pydantic model."""

    encoding: str | None = "json"

    def __init__(self, model: type[M]) -> None:
        self._model = model

    def parse(self, body: bytes) -> M:
        """Validate the body against the model.

        Raises:
            InvalidDataError: On malformed JSON, invalid UTF-8 or a body that
                does not match the model.
        """
        try:
            return self._model.model_validate_json(body)
        except ValidationError as e:
            raise InvalidDataError(
                f"invalid {self._model.__name__} response: {e.error_count()} validation error(s)"
            ) from e

    def __repr__(self) -> str:
        return f"JsonCodec({self._model.__name__})"


class ProtobufCodec(Generic[P]):
    """Decode a binary protobuf body."""

    encoding: str | None = "protobuf"

    def __init__(self, message_cls: type[P]) -> None:
        self._message_cls = message_cls

    def parse(self, body: bytes) -> P:
        """Parse the body as a protobuf message.

        Raises:
            InvalidDataError: If the body is not a valid encoding of the message.
        """
        message = self._message_cls()
        try:
            message.ParseFromString(body)
        except DecodeError as e:
            raise InvalidDataError(f"invalid protobuf response: {e}") from e
        return message

    def __repr__(self) -> str:
        return f"ProtobufCodec({self._message_cls.DESCRIPTOR.full_name})"


IGNORE: Codec[Any] = IgnoreCodec()
