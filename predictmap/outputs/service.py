"""Output deserialization: raw response items to ``OutputRecord`` values."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import ValidationError

from predictmap.common.tree import Node, as_node
from predictmap.core.config import get_settings
from predictmap.core.errors import DeserializationError, MalformedRecord, MissingField, VariantMismatch
from predictmap.predictions import Prediction

from .contracts import InputReference, OutputRecord, Status, TypedOutputRecord
from .inputs import deserialize_input
from .registry import ModelType, ModelTypeRegistry, get_registry

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=Prediction)

InputParser = Callable[[Node], InputReference]


def deserialize_status(node: Node) -> Status:
    """Read a status object; ``message`` is accepted in place of ``description``."""
    description = node.find("description") or node.find("message")
    if description is None:
        raise MissingField("Missing field 'description'", path=f"{node.path}.description")
    details = node.find("details")
    return Status(
        code=node.get("code").as_int(),
        description=description.as_str(),
        details=details.as_str() if details is not None else None,
    )


def invalid_entry(exc: ValidationError, node: Node, what: str) -> MalformedRecord:
    """Turn a constraint failure raised by a pydantic model into ``MalformedRecord``."""
    first = exc.errors()[0]
    return MalformedRecord(f"Invalid {what}: {first['msg']}", path=node.path)


def _deserialize_predictions(
    model_type: ModelType,
    root: Node,
    registry: ModelTypeRegistry,
) -> tuple[Prediction, ...]:
    data = root.find("data")
    if data is None:
        return ()
    data.as_dict()
    if data.is_empty():
        return ()

    parser = registry.parser_for(model_type)
    entries = data.get(model_type.payload_key).as_list()

    predictions: list[Prediction] = []
    for index, entry in enumerate(entries):
        try:
            predictions.append(parser(entry, data))
        except MalformedRecord as exc:
            exc.entry_index = index
            raise
        except ValidationError as exc:
            error = invalid_entry(exc, entry, model_type.variant.__name__)
            error.entry_index = index
            raise error from exc
    return tuple(predictions)


def _log_failure(exc: DeserializationError, root: Node) -> None:
    logger.warning("Output deserialization failed: %s", exc)
    if get_settings().debug_log_raw_payload:
        logger.debug("Raw output payload: %r", root.value)


def deserialize_output(
    model_type: ModelType | str,
    raw_item: Any,
    *,
    registry: ModelTypeRegistry | None = None,
    input_parser: InputParser = deserialize_input,
) -> OutputRecord:
    """Deserialize one response item produced by *model_type*.

    Raises ``MalformedRecord`` (or a subclass) when a required field is missing
    or mistyped, or when any prediction entry is invalid; no partial record is
    ever returned.  ``data`` that is absent or ``{}`` yields no predictions.
    """
    registry = registry or get_registry()
    model_type = registry.coerce(model_type)
    registry.parser_for(model_type)
    root = as_node(raw_item)

    try:
        output_id = root.get("id").as_str()
        status = deserialize_status(root.get("status"))
        created_at = root.get("created_at").as_datetime()

        input_node = root.find("input")
        echoed_input = input_parser(input_node) if input_node is not None else None

        model_id = root.find("model.id")
        predictions = _deserialize_predictions(model_type, root, registry)
    except DeserializationError as exc:
        if exc.model_type is None:
            exc.model_type = model_type.name
        _log_failure(exc, root)
        raise
    except ValidationError as exc:
        error = invalid_entry(exc, root, "output")
        error.model_type = model_type.name
        _log_failure(error, root)
        raise error from exc

    logger.debug(
        "Deserialized output %s (%s): %d predictions",
        output_id,
        model_type.name,
        len(predictions),
    )
    return OutputRecord(
        id=output_id,
        status=status,
        created_at=created_at,
        model_type=model_type.name,
        model_id=model_id.as_str() if model_id is not None else None,
        input=echoed_input,
        predictions=predictions,
    )


def resolve_typed(
    variant: type[Prediction],
    model_type: ModelType | str | None,
    registry: ModelTypeRegistry,
) -> ModelType:
    """Pick the model type for a typed call and check it produces *variant*."""
    if model_type is None:
        return registry.resolve_variant(variant)
    resolved = registry.coerce(model_type)
    if resolved.variant is not variant:
        raise VariantMismatch(variant, resolved.variant, model_type=resolved.name)
    return resolved


def deserialize_typed(
    variant: type[V],
    raw_item: Any,
    *,
    model_type: ModelType | str | None = None,
    registry: ModelTypeRegistry | None = None,
    input_parser: InputParser = deserialize_input,
) -> TypedOutputRecord[V]:
    """Deserialize *raw_item* expecting predictions of exactly type *variant*.

    Without *model_type* the model type is the one registered for *variant*.
    Raises ``VariantMismatch`` if the model type or any prediction disagrees.
    """
    registry = registry or get_registry()
    resolved = resolve_typed(variant, model_type, registry)
    record = deserialize_output(resolved, raw_item, registry=registry, input_parser=input_parser)
    return TypedOutputRecord.from_record(record, variant)
