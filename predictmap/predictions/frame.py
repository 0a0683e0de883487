from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from predictmap.common.tree import Node

from .base import Prediction
from .concept import Concept, deserialize_concepts


class Frame(Prediction):
    """One sampled video frame with the concepts predicted for it."""

    TYPE: ClassVar[str] = "frame"

    index: int = Field(ge=0)
    time: int = Field(ge=0)  # milliseconds from the start of the video
    concepts: tuple[Concept, ...] = ()

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> Frame:
        return cls(
            index=entry.get("frame_info.index").as_int(),
            time=entry.get("frame_info.time").as_int(),
            concepts=deserialize_concepts(entry.find("data.concepts")),
        )
