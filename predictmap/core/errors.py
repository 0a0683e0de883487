"""Typed failures raised while mapping service payloads to prediction objects."""

from __future__ import annotations


class DeserializationError(Exception):
    """Base class for every failure raised by the output mapping layer.

    The optional context attributes are filled in as the error travels up
    through the deserializer and the batch assembler, so the final message
    names the model type, the offending field path and the entry, output and
    item indexes.
    """

    def __init__(
        self,
        message: str,
        *,
        model_type: str | None = None,
        path: str | None = None,
        entry_index: int | None = None,
        item_index: int | None = None,
        output_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.model_type = model_type
        self.path = path
        self.entry_index = entry_index
        self.item_index = item_index
        self.output_index = output_index

    def __str__(self) -> str:
        context = []
        if self.model_type is not None:
            context.append(f"model_type={self.model_type!r}")
        if self.item_index is not None:
            context.append(f"item={self.item_index}")
        if self.output_index is not None:
            context.append(f"output={self.output_index}")
        if self.entry_index is not None:
            context.append(f"entry={self.entry_index}")
        if self.path is not None:
            context.append(f"path={self.path}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class UnknownModelType(DeserializationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown model type {name!r}", model_type=name)
        self.name = name


class AmbiguousOrUnknownVariant(DeserializationError):
    def __init__(self, variant: type, candidates: tuple[str, ...] = ()) -> None:
        if candidates:
            message = (
                f"Prediction type {variant.__name__} is produced by several model types: "
                f"{', '.join(candidates)}"
            )
        else:
            message = f"No model type produces prediction type {variant.__name__}"
        super().__init__(message)
        self.variant = variant
        self.candidates = candidates


class UnsupportedVariant(DeserializationError):
    pass


class MalformedRecord(DeserializationError):
    pass


class MissingField(MalformedRecord):
    pass


class WrongType(MalformedRecord):
    pass


class VariantMismatch(DeserializationError):
    def __init__(
        self,
        expected: type,
        actual: type,
        *,
        model_type: str | None = None,
        entry_index: int | None = None,
    ) -> None:
        super().__init__(
            f"Expected {expected.__name__} predictions, got {actual.__name__}",
            model_type=model_type,
            entry_index=entry_index,
        )
        self.expected = expected
        self.actual = actual
