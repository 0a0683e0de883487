"""Model type registry: maps model type names to prediction shapes and payload keys."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType

from predictmap.common.tree import Node
from predictmap.core.config import get_settings
from predictmap.core.errors import AmbiguousOrUnknownVariant, UnknownModelType, UnsupportedVariant
from predictmap.predictions import (
    Color,
    Concept,
    Demographics,
    Embedding,
    FaceConcepts,
    FaceDetection,
    FaceEmbedding,
    Focus,
    Frame,
    Logo,
    Prediction,
)

logger = logging.getLogger(__name__)

Parser = Callable[[Node, Node], Prediction]


@dataclass(frozen=True)
class ModelType:
    """A family of predictions and where its entries live in ``data``."""

    name: str
    variant: type[Prediction]
    payload_path: tuple[str, ...]
    aliases: tuple[str, ...] = ()

    @property
    def payload_key(self) -> str:
        return ".".join(self.payload_path)


DEFAULT_MODEL_TYPES: tuple[ModelType, ...] = (
    ModelType("color", Color, ("colors",)),
    ModelType("concept", Concept, ("concepts",)),
    ModelType("demographics", Demographics, ("regions",), aliases=("facedetect-demographics",)),
    ModelType("embedding", Embedding, ("embeddings",), aliases=("embed",)),
    ModelType("face-concepts", FaceConcepts, ("regions",), aliases=("facedetect-identity",)),
    ModelType("face-detection", FaceDetection, ("regions",), aliases=("facedetect",)),
    ModelType(
        "face-embedding",
        FaceEmbedding,
        ("regions",),
        aliases=("detect-embed", "facedetect-embed"),
    ),
    ModelType("focus", Focus, ("regions",)),
    ModelType("logo", Logo, ("regions",), aliases=("detection",)),
    ModelType("video", Frame, ("frames",)),
)

DEFAULT_PARSERS: Mapping[type[Prediction], Parser] = {
    model_type.variant: model_type.variant.deserialize for model_type in DEFAULT_MODEL_TYPES
}


def _normalize(name: str) -> str:
    return name.strip().lower()


class ModelTypeRegistry:
    """Read-only lookup of model types by name and by prediction class.

    All mappings are built in ``__init__`` and exposed through read-only
    proxies, so an instance can be shared between threads.
    """

    def __init__(
        self,
        model_types: Iterable[ModelType],
        parsers: Mapping[type[Prediction], Parser],
        *,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        ordered = tuple(model_types)
        by_name: dict[str, ModelType] = {}
        for model_type in ordered:
            for key in (model_type.name, *model_type.aliases):
                key = _normalize(key)
                if key in by_name:
                    msg = f"Model type name {key!r} registered twice"
                    raise ValueError(msg)
                by_name[key] = model_type

        for alias, target in (aliases or {}).items():
            alias, target = _normalize(alias), _normalize(target)
            if target not in by_name:
                logger.warning("Alias %r points to unknown model type %r; ignored", alias, target)
                continue
            if alias in by_name and by_name[alias] is not by_name[target]:
                logger.warning(
                    "Alias %r would shadow model type %r; ignored", alias, by_name[alias].name
                )
                continue
            by_name[alias] = by_name[target]

        self._model_types = ordered
        self._by_name = MappingProxyType(by_name)
        self._parsers = MappingProxyType(dict(parsers))

    @property
    def model_types(self) -> tuple[ModelType, ...]:
        return self._model_types

    @property
    def names(self) -> Mapping[str, ModelType]:
        return self._by_name

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _normalize(name) in self._by_name

    def resolve(self, name: str) -> ModelType:
        """Return the model type registered under *name* or one of its aliases."""
        try:
            return self._by_name[_normalize(name)]
        except KeyError:
            raise UnknownModelType(name) from None

    def resolve_variant(self, variant: type[Prediction]) -> ModelType:
        """Return the single model type producing exactly *variant*."""
        matches = tuple(mt for mt in self._model_types if mt.variant is variant)
        if len(matches) != 1:
            raise AmbiguousOrUnknownVariant(variant, tuple(mt.name for mt in matches))
        return matches[0]

    def parser_for(self, model_type: ModelType) -> Parser:
        parser = self._parsers.get(model_type.variant)
        if parser is None:
            raise UnsupportedVariant(
                f"No parser wired for prediction type {model_type.variant.__name__}",
                model_type=model_type.name,
            )
        return parser

    def coerce(self, model_type: ModelType | str) -> ModelType:
        if isinstance(model_type, ModelType):
            return model_type
        return self.resolve(model_type)


@lru_cache
def get_registry() -> ModelTypeRegistry:
    settings = get_settings()
    return ModelTypeRegistry(
        DEFAULT_MODEL_TYPES,
        DEFAULT_PARSERS,
        aliases=settings.model_type_aliases,
    )


def resolve(name: str) -> ModelType:
    return get_registry().resolve(name)


def resolve_variant(variant: type[Prediction]) -> ModelType:
    return get_registry().resolve_variant(variant)
