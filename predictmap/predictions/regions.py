"""Region-based predictions: faces, logos and focus density."""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from pydantic import Field

from predictmap.common.tree import Node
from predictmap.core.errors import MalformedRecord

from .base import RegionPrediction
from .concept import Concept, deserialize_concepts
from .embedding import Embedding


class FaceDetection(RegionPrediction):
    TYPE: ClassVar[str] = "face-detection"

    concepts: tuple[Concept, ...] = ()

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> FaceDetection:
        return cls(
            **cls.region_fields(entry),
            concepts=deserialize_concepts(entry.find("data.concepts")),
        )


class FaceConcepts(RegionPrediction):
    """Identity concepts recognised for a detected face."""

    TYPE: ClassVar[str] = "face-concepts"

    concepts: tuple[Concept, ...]

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> FaceConcepts:
        return cls(
            **cls.region_fields(entry),
            concepts=deserialize_concepts(entry.get("data.face.identity.concepts")),
        )


class Demographics(RegionPrediction):
    TYPE: ClassVar[str] = "demographics"

    age_appearance: tuple[Concept, ...]
    gender_appearance: tuple[Concept, ...]
    multicultural_appearance: tuple[Concept, ...]

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> Demographics:
        face = entry.get("data.face")
        return cls(
            **cls.region_fields(entry),
            age_appearance=deserialize_concepts(face.get("age_appearance.concepts")),
            gender_appearance=deserialize_concepts(face.get("gender_appearance.concepts")),
            multicultural_appearance=deserialize_concepts(
                face.get("multicultural_appearance.concepts")
            ),
        )


class FaceEmbedding(RegionPrediction):
    TYPE: ClassVar[str] = "face-embedding"

    embeddings: tuple[Embedding, ...]

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> FaceEmbedding:
        return cls(
            **cls.region_fields(entry),
            embeddings=tuple(
                Embedding.deserialize(item) for item in entry.get("data.embeddings").as_list()
            ),
        )


class Logo(RegionPrediction):
    TYPE: ClassVar[str] = "logo"

    concepts: tuple[Concept, ...]

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> Logo:
        return cls(
            **cls.region_fields(entry),
            concepts=deserialize_concepts(entry.get("data.concepts")),
        )


class Focus(RegionPrediction):
    """Focus density of a region plus the focus value of the whole image.

    The image-level value lives outside the regions array, at
    ``data.focus.value`` of the enclosing output, so it is read from *data*.
    """

    TYPE: ClassVar[str] = "focus"

    density: Decimal = Field(ge=0, le=1)
    value: Decimal = Field(ge=0, le=1)

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> Focus:
        if data is None:
            raise MalformedRecord(
                "Focus predictions need the enclosing output data", path=entry.path
            )
        return cls(
            **cls.region_fields(entry),
            density=entry.get("data.focus.density").as_decimal(),
            value=data.get("focus.value").as_decimal(),
        )
