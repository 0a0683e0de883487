"""Echoed input parsing."""

from __future__ import annotations

from predictmap.common.tree import Node
from predictmap.core.errors import MissingField

from .contracts import InputReference


def deserialize_input(node: Node) -> InputReference:
    """Build an ``InputReference`` from the ``input`` object of an output.

    The media kind is taken from whichever of ``data.image`` / ``data.video``
    is present; an input carrying neither is malformed.
    """
    created_at = node.find("created_at")
    metadata = node.find("data.metadata")

    for kind in ("image", "video"):
        media = node.find(f"data.{kind}")
        if media is None:
            continue
        url = media.find("url")
        return InputReference(
            id=node.get("id").as_str(),
            kind=kind,
            url=url.as_str() if url is not None else None,
            has_base64=media.has("base64"),
            created_at=created_at.as_datetime() if created_at is not None else None,
            metadata=metadata.as_dict() if metadata is not None else {},
        )

    raise MissingField("Input has neither image nor video data", path=f"{node.path}.data")
