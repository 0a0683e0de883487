"""Workflow predict results: one input run through several models.

Unlike a single-model predict call, the model type of each output is not
known up front; it is read from ``model.output_info.type_ext`` of the output
itself and resolved through the registry.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from predictmap.common.tree import Node, as_node
from predictmap.core.errors import DeserializationError
from predictmap.outputs.contracts import InputReference, OutputRecord, Status
from predictmap.outputs.inputs import deserialize_input
from predictmap.outputs.registry import ModelTypeRegistry, get_registry
from predictmap.outputs.service import InputParser, deserialize_output, deserialize_status

logger = logging.getLogger(__name__)


class WorkflowResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    status: Status
    input: InputReference | None = None
    outputs: tuple[OutputRecord, ...] = ()


def _deserialize_workflow_output(
    output: Node,
    registry: ModelTypeRegistry,
    input_parser: InputParser,
) -> OutputRecord:
    type_ext = output.get("model.output_info.type_ext")
    try:
        model_type = registry.resolve(type_ext.as_str())
    except DeserializationError as exc:
        exc.path = type_ext.path
        raise
    return deserialize_output(model_type, output, registry=registry, input_parser=input_parser)


def _deserialize_result(
    node: Node,
    registry: ModelTypeRegistry,
    input_parser: InputParser,
) -> WorkflowResult:
    input_node = node.find("input")
    outputs: list[OutputRecord] = []
    for index, output in enumerate(node.get("outputs").as_list()):
        try:
            outputs.append(_deserialize_workflow_output(output, registry, input_parser))
        except DeserializationError as exc:
            exc.output_index = index
            raise
    return WorkflowResult(
        status=deserialize_status(node.get("status")),
        input=input_parser(input_node) if input_node is not None else None,
        outputs=tuple(outputs),
    )


def deserialize_workflow_results(
    payload: Any,
    *,
    registry: ModelTypeRegistry | None = None,
    input_parser: InputParser = deserialize_input,
) -> list[WorkflowResult]:
    """Deserialize the ``results`` array of a workflow predict response."""
    registry = registry or get_registry()
    results: list[WorkflowResult] = []
    for index, node in enumerate(as_node(payload).get("results").as_list()):
        try:
            results.append(_deserialize_result(node, registry, input_parser))
        except DeserializationError as exc:
            exc.item_index = index
            logger.warning("Workflow result %d failed: %s", index, exc)
            raise
    return results
