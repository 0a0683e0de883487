"""Typed deserialization of computer-vision prediction outputs."""

from __future__ import annotations

from .core.errors import (
    AmbiguousOrUnknownVariant,
    DeserializationError,
    MalformedRecord,
    MissingField,
    UnknownModelType,
    UnsupportedVariant,
    VariantMismatch,
    WrongType,
)
from .models.versions import ModelVersion, deserialize_model_versions
from .outputs.batch import deserialize_batch, deserialize_outputs_response, deserialize_typed_batch
from .outputs.contracts import InputReference, OutputRecord, Status, TypedOutputRecord
from .outputs.registry import ModelType, ModelTypeRegistry, get_registry, resolve, resolve_variant
from .outputs.service import deserialize_output, deserialize_typed
from .workflows.results import WorkflowResult, deserialize_workflow_results

__all__ = [
    "AmbiguousOrUnknownVariant",
    "DeserializationError",
    "InputReference",
    "MalformedRecord",
    "MissingField",
    "ModelType",
    "ModelTypeRegistry",
    "ModelVersion",
    "OutputRecord",
    "Status",
    "TypedOutputRecord",
    "UnknownModelType",
    "UnsupportedVariant",
    "VariantMismatch",
    "WorkflowResult",
    "WrongType",
    "deserialize_batch",
    "deserialize_model_versions",
    "deserialize_output",
    "deserialize_outputs_response",
    "deserialize_typed",
    "deserialize_typed_batch",
    "deserialize_workflow_results",
    "get_registry",
    "resolve",
    "resolve_variant",
]
