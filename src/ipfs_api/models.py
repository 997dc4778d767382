"""Wire models for the JSON bodies the node returns.

Field names on the wire are capitalized (Hash, NumLinks, ...); the models
expose snake_case attributes and accept either spelling on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Stat(_WireModel):
    """Status of an IPFS object.

    Returned from stat(), or synthesized locally by CommittedObject.stat().

    Attributes:
        hash: The object's hash.
        num_links: The number of links in the object.
        data_size: The size of the object's data field.
        cumulative_size: The total size of the object and its children.
    """

    hash: str = Field(alias="Hash")
    num_links: int = Field(alias="NumLinks", ge=0)
    data_size: int = Field(alias="DataSize", ge=0)
    cumulative_size: int = Field(alias="CumulativeSize", ge=0)


class ResolveResult(_WireModel):
    path: str = Field(alias="Path")


class PutResult(_WireModel):
    hash: str = Field(alias="Hash")


class ErrorBody(_WireModel):
    """Structured error the node sends with non-success responses."""

    message: str = Field(alias="Message")
    code: int = Field(alias="Code", default=0)
