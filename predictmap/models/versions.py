"""Model version listings."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from predictmap.common.tree import Node, as_node
from predictmap.core.errors import MalformedRecord
from predictmap.outputs.contracts import Status
from predictmap.outputs.service import deserialize_status, invalid_entry

logger = logging.getLogger(__name__)


class ModelVersion(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    created_at: datetime
    status: Status
    active_concept_count: int | None = Field(default=None, ge=0)
    total_input_count: int | None = Field(default=None, ge=0)

    @classmethod
    def deserialize(cls, node: Node) -> ModelVersion:
        active = node.find("active_concept_count")
        total = node.find("total_input_count")
        return cls(
            id=node.get("id").as_str(),
            created_at=node.get("created_at").as_datetime(),
            status=deserialize_status(node.get("status")),
            active_concept_count=active.as_int() if active is not None else None,
            total_input_count=total.as_int() if total is not None else None,
        )


def deserialize_model_versions(payload: Any) -> list[ModelVersion]:
    """Deserialize the ``model_versions`` array of a list-versions response.

    One malformed version fails the whole page.
    """
    versions: list[ModelVersion] = []
    for index, node in enumerate(as_node(payload).get("model_versions").as_list()):
        try:
            versions.append(ModelVersion.deserialize(node))
        except MalformedRecord as exc:
            exc.entry_index = index
            logger.warning("Model version listing failed: %s", exc)
            raise
        except ValidationError as exc:
            error = invalid_entry(exc, node, "model version")
            error.entry_index = index
            logger.warning("Model version listing failed: %s", error)
            raise error from exc
    return versions
