"""Batch assembly over ordered sequences of response items."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from predictmap.common.tree import as_node
from predictmap.core.errors import DeserializationError, VariantMismatch
from predictmap.predictions import Prediction

from .contracts import OutputRecord, TypedOutputRecord
from .inputs import deserialize_input
from .registry import ModelType, ModelTypeRegistry, get_registry
from .service import InputParser, deserialize_output, resolve_typed

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=Prediction)


def deserialize_batch(
    model_type: ModelType | str,
    raw_items: Iterable[Any],
    *,
    registry: ModelTypeRegistry | None = None,
    input_parser: InputParser = deserialize_input,
) -> list[OutputRecord]:
    """Deserialize every item in order, failing on the first bad one.

    The error raised by the failing item is re-raised with ``item_index`` set;
    nothing deserialized before it is returned.
    """
    registry = registry or get_registry()
    resolved = registry.coerce(model_type)
    registry.parser_for(resolved)

    records: list[OutputRecord] = []
    for index, raw_item in enumerate(raw_items):
        try:
            records.append(
                deserialize_output(
                    resolved,
                    raw_item,
                    registry=registry,
                    input_parser=input_parser,
                )
            )
        except DeserializationError as exc:
            exc.item_index = index
            logger.warning("Batch of %r outputs failed at item %d", resolved.name, index)
            raise

    logger.debug("Deserialized batch of %d %r outputs", len(records), resolved.name)
    return records


def deserialize_typed_batch(
    variant: type[V],
    raw_items: Iterable[Any],
    *,
    model_type: ModelType | str | None = None,
    registry: ModelTypeRegistry | None = None,
    input_parser: InputParser = deserialize_input,
) -> list[TypedOutputRecord[V]]:
    registry = registry or get_registry()
    resolved = resolve_typed(variant, model_type, registry)
    records = deserialize_batch(resolved, raw_items, registry=registry, input_parser=input_parser)

    typed: list[TypedOutputRecord[V]] = []
    for index, record in enumerate(records):
        try:
            typed.append(TypedOutputRecord.from_record(record, variant))
        except VariantMismatch as exc:
            exc.item_index = index
            raise
    return typed


def deserialize_outputs_response(
    model_type: ModelType | str,
    payload: Any,
    *,
    registry: ModelTypeRegistry | None = None,
    input_parser: InputParser = deserialize_input,
) -> list[OutputRecord]:
    """Deserialize the ``outputs`` array of a predict response."""
    registry = registry or get_registry()
    resolved = registry.coerce(model_type)
    try:
        items = as_node(payload).get("outputs").as_list()
    except DeserializationError as exc:
        exc.model_type = resolved.name
        raise
    return deserialize_batch(resolved, items, registry=registry, input_parser=input_parser)
