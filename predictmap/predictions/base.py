"""Base classes shared by every prediction shape."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from predictmap.common.tree import Node


class Prediction(BaseModel):
    """One immutable prediction value produced by a model.

    Subclasses implement ``deserialize(entry, data)`` where *entry* is the
    array element holding the prediction and *data* is the enclosing
    output's ``data`` object (needed by shapes that read output-level values).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    TYPE: ClassVar[str] = "prediction"

    @classmethod
    def deserialize(cls, entry: Node, data: Node | None = None) -> Prediction:
        raise NotImplementedError


class Crop(BaseModel):
    """Normalized bounding box; every edge lies in ``[0, 1]``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    top: float = Field(ge=0.0, le=1.0)
    left: float = Field(ge=0.0, le=1.0)
    bottom: float = Field(ge=0.0, le=1.0)
    right: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _edges_ordered(self) -> Crop:
        if self.top > self.bottom or self.left > self.right:
            msg = f"Crop edges out of order: {self.top}, {self.left}, {self.bottom}, {self.right}"
            raise ValueError(msg)
        return self

    @classmethod
    def deserialize(cls, node: Node) -> Crop:
        return cls(
            top=node.get("top_row").as_float(),
            left=node.get("left_col").as_float(),
            bottom=node.get("bottom_row").as_float(),
            right=node.get("right_col").as_float(),
        )


class RegionPrediction(Prediction):
    """A prediction tied to a region of the image."""

    TYPE: ClassVar[str] = "region"

    id: str | None = None
    crop: Crop

    @staticmethod
    def region_fields(entry: Node) -> dict:
        region_id = entry.find("id")
        return {
            "id": region_id.as_str() if region_id is not None else None,
            "crop": Crop.deserialize(entry.get("region_info.bounding_box")),
        }
