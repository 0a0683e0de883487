"""Concept and color predictions."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from predictmap.common.tree import Node

from .base import Prediction


class Concept(Prediction):
    """A tagged concept with an optional confidence value."""

    TYPE: ClassVar[str] = "concept"

    id: str
    name: str | None = None
    value: float | None = Field(default=None, ge=0.0, le=1.0)
    app_id: str | None = None
    language: str | None = None

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> Concept:
        name = entry.find("name")
        value = entry.find("value")
        app_id = entry.find("app_id")
        language = entry.find("language")
        return cls(
            id=entry.get("id").as_str(),
            name=name.as_str() if name is not None else None,
            value=value.as_float() if value is not None else None,
            app_id=app_id.as_str() if app_id is not None else None,
            language=language.as_str() if language is not None else None,
        )


def deserialize_concepts(node: Node | None) -> tuple[Concept, ...]:
    """Convert a concepts array; ``None`` (absent field) gives no concepts."""
    if node is None:
        return ()
    return tuple(Concept.deserialize(item) for item in node.as_list())


class Color(Prediction):
    TYPE: ClassVar[str] = "color"

    raw_hex: str
    hex: str
    web_safe_color_name: str
    value: float = Field(ge=0.0, le=1.0)

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> Color:
        return cls(
            raw_hex=entry.get("raw_hex").as_str(),
            hex=entry.get("w3c.hex").as_str(),
            web_safe_color_name=entry.get("w3c.name").as_str(),
            value=entry.get("value").as_float(),
        )
