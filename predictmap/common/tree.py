"""Typed access to parsed JSON trees with explicit failures.

Every accessor either returns a value of the requested type or raises
``MissingField`` / ``WrongType`` naming the path of the offending node,
e.g. ``$.data.regions[1].region_info.bounding_box.top_row``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from predictmap.core.config import get_settings
from predictmap.core.errors import MissingField, WrongType

# datetime.fromisoformat stops at microseconds; the service emits nanoseconds.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence):
        return "array"
    return type(value).__name__


class Node:
    """A value inside a parsed JSON document together with its path."""

    __slots__ = ("value", "path")

    def __init__(self, value: Any, path: str = "$") -> None:
        self.value = value
        self.path = path

    def __repr__(self) -> str:
        return f"Node({self.path}={_type_name(self.value)})"

    @property
    def is_null(self) -> bool:
        return self.value is None

    def is_empty(self) -> bool:
        """True for null, ``{}`` and ``[]``."""
        if self.value is None:
            return True
        if isinstance(self.value, (Mapping, list, tuple)):
            return len(self.value) == 0
        return False

    # -- navigation -------------------------------------------------------

    def _child(self, key: str) -> Node | None:
        mapping = self.as_dict()
        if key not in mapping:
            return None
        return Node(mapping[key], f"{self.path}.{key}")

    def get(self, path: str) -> Node:
        """Follow a dotted *path* of object keys; raise ``MissingField`` if absent.

        A key that is present with a ``null`` value is returned as a null node;
        the typed coercions reject it.
        """
        node = self
        for key in path.split("."):
            child = node._child(key)
            if child is None:
                raise MissingField(f"Missing field {key!r}", path=f"{node.path}.{key}")
            node = child
        return node

    def find(self, path: str) -> Node | None:
        """Like ``get`` but return ``None`` when a key is absent or null."""
        node = self
        for key in path.split("."):
            if node.is_null:
                return None
            child = node._child(key)
            if child is None or child.is_null:
                return None
            node = child
        return node

    def has(self, path: str) -> bool:
        return self.find(path) is not None

    # -- coercions --------------------------------------------------------

    def _wrong(self, expected: str) -> WrongType:
        return WrongType(
            f"Expected {expected}, got {_type_name(self.value)}",
            path=self.path,
        )

    def as_dict(self) -> Mapping[str, Any]:
        if not isinstance(self.value, Mapping):
            raise self._wrong("object")
        return self.value

    def as_list(self) -> list[Node]:
        if isinstance(self.value, (str, bytes)) or not isinstance(self.value, Sequence):
            raise self._wrong("array")
        return [Node(item, f"{self.path}[{index}]") for index, item in enumerate(self.value)]

    def as_str(self) -> str:
        if not isinstance(self.value, str):
            raise self._wrong("string")
        return self.value

    def as_bool(self) -> bool:
        if not isinstance(self.value, bool):
            raise self._wrong("boolean")
        return self.value

    def as_int(self) -> int:
        value = self.value
        if isinstance(value, bool):
            raise self._wrong("integer")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        # int64 fields are sent as strings by the service's JSON encoder.
        if isinstance(value, str) and re.fullmatch(r"-?\d+", value.strip()):
            return int(value)
        raise self._wrong("integer")

    def as_float(self) -> float:
        value = self.value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._wrong("number")
        result = float(value)
        if not math.isfinite(result):
            raise self._wrong("finite number")
        return result

    def as_decimal(self) -> Decimal:
        value = self.value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._wrong("number")
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise self._wrong("number") from exc
        if not result.is_finite():
            raise self._wrong("finite number")
        return result

    def as_datetime(self) -> datetime:
        """Parse an ISO-8601 timestamp; naive values follow ``assume_utc_timestamps``."""
        text = self.as_str().strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION_RE.sub(r"\1", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise self._wrong("ISO-8601 timestamp") from exc
        if parsed.tzinfo is None:
            if not get_settings().assume_utc_timestamps:
                raise self._wrong("timezone-aware timestamp")
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


def as_node(raw: Any) -> Node:
    """Wrap *raw* in a root ``Node`` unless it already is one."""
    if isinstance(raw, Node):
        return raw
    return Node(raw)
