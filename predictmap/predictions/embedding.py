from __future__ import annotations

from typing import ClassVar

from pydantic import model_validator

from predictmap.common.tree import Node

from .base import Prediction


class Embedding(Prediction):
    """A numeric embedding vector."""

    TYPE: ClassVar[str] = "embedding"

    vector: tuple[float, ...]
    num_dimensions: int

    @model_validator(mode="after")
    def _dimensions_match(self) -> Embedding:
        if self.num_dimensions != len(self.vector):
            msg = f"num_dimensions={self.num_dimensions} but vector has {len(self.vector)} values"
            raise ValueError(msg)
        return self

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> Embedding:
        return cls(
            vector=tuple(item.as_float() for item in entry.get("vector").as_list()),
            num_dimensions=entry.get("num_dimensions").as_int(),
        )
