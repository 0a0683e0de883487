"""Output contracts: status, echoed input, output records and their typed views."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_serializer, field_validator

from predictmap.core.errors import VariantMismatch
from predictmap.predictions import Prediction

V = TypeVar("V", bound=Prediction)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class Status(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    code: int
    description: str
    details: str | None = None


class InputReference(BaseModel):
    """The input echoed back by the service alongside an output."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    kind: Literal["image", "video"]
    url: str | None = None
    has_base64: bool = False
    created_at: datetime | None = None
    metadata: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        # rebuilt, never shared with the caller's tree
        return _freeze(value)

    @field_serializer("metadata")
    def _dump_metadata(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(value)


class OutputRecord(BaseModel):
    """One deserialized output: metadata plus predictions in service order."""

    model_config = ConfigDict(frozen=True, extra="forbid", protected_namespaces=())

    id: str
    status: Status
    created_at: datetime
    model_type: str
    model_id: str | None = None
    input: InputReference | None = None
    predictions: tuple[SerializeAsAny[Prediction], ...] = ()


@dataclass(frozen=True)
class TypedOutputRecord(Generic[V]):
    """An ``OutputRecord`` whose predictions are all exactly of type ``V``.

    Build it with ``from_record``; the check runs once and ``predictions``
    is an immutable tuple afterwards.
    """

    record: OutputRecord
    variant: type[V]
    predictions: tuple[V, ...]

    @classmethod
    def from_record(cls, record: OutputRecord, variant: type[V]) -> TypedOutputRecord[V]:
        for index, prediction in enumerate(record.predictions):
            if type(prediction) is not variant:
                raise VariantMismatch(
                    variant,
                    type(prediction),
                    model_type=record.model_type,
                    entry_index=index,
                )
        return cls(record=record, variant=variant, predictions=record.predictions)

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def status(self) -> Status:
        return self.record.status

    @property
    def created_at(self) -> datetime:
        return self.record.created_at

    @property
    def input(self) -> InputReference | None:
        return self.record.input
