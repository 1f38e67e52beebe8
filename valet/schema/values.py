"""Tagged value model for decoded YAML documents.

Every decoded YAML node maps onto exactly one ``ValueKind``. Values are
treated as immutable once built: merging produces new mappings and
never mutates its operands.

Usage::

    from valet.schema.values import Value, ValueKind

    value = Value.from_python(yaml.safe_load(text))
    if value.kind is ValueKind.MAPPING:
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class ValueKind(StrEnum):
    """Closed set of value tags, named after their JSON Schema types."""

    NULL = "null"
    BOOL = "boolean"
    INT = "integer"
    FLOAT = "number"
    STRING = "string"
    SEQUENCE = "array"
    MAPPING = "object"


@dataclass(frozen=True)
class Value:
    """A decoded YAML value.

    Attributes:
        kind: Tag of the value.
        data: Payload. ``None`` for NULL, a Python scalar for scalars,
            a tuple of Values for SEQUENCE and an insertion-ordered dict
            of str to Value for MAPPING.
    """

    kind: ValueKind
    data: Any = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL)

    @classmethod
    def boolean(cls, value: bool) -> Value:
        return cls(ValueKind.BOOL, bool(value))

    @classmethod
    def integer(cls, value: int) -> Value:
        return cls(ValueKind.INT, int(value))

    @classmethod
    def number(cls, value: float) -> Value:
        return cls(ValueKind.FLOAT, float(value))

    @classmethod
    def string(cls, value: str) -> Value:
        return cls(ValueKind.STRING, str(value))

    @classmethod
    def sequence(cls, items: list[Value] | tuple[Value, ...] = ()) -> Value:
        return cls(ValueKind.SEQUENCE, tuple(items))

    @classmethod
    def mapping(cls, entries: dict[str, Value] | None = None) -> Value:
        return cls(ValueKind.MAPPING, dict(entries or {}))

    @classmethod
    def from_python(cls, obj: Any) -> Value:
        """Build a Value from the output of ``yaml.safe_load``.

        The integer/float distinction is taken from the decoded Python
        type and never re-derived from the number itself, so ``1.0``
        stays a FLOAT.

        Args:
            obj: Decoded YAML data (None, bool, int, float, str, date,
                list, dict, or nested combinations).

        Returns:
            The equivalent Value tree.
        """
        if obj is None:
            return cls.null()
        # bool is a subclass of int
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.number(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (datetime, date)):
            return cls.string(obj.isoformat())
        if isinstance(obj, (list, tuple)):
            return cls.sequence([cls.from_python(item) for item in obj])
        if isinstance(obj, dict):
            return cls.mapping(_convert_entries(obj))
        if isinstance(obj, bytes):
            return cls.string(obj.decode("utf-8", errors="replace"))
        return cls.string(str(obj))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def items(self) -> tuple[Value, ...]:
        """Elements of a SEQUENCE."""
        if self.kind is not ValueKind.SEQUENCE:
            raise TypeError(f"{self.kind} value has no items")
        return self.data

    @property
    def entries(self) -> dict[str, Value]:
        """Entries of a MAPPING."""
        if self.kind is not ValueKind.MAPPING:
            raise TypeError(f"{self.kind} value has no entries")
        return self.data

    def is_empty(self) -> bool:
        """Whether this value counts as an empty default.

        Null, the zero-length string, and sequences or mappings with no
        elements are empty. Booleans and numbers never are.
        """
        if self.kind is ValueKind.NULL:
            return True
        if self.kind in (ValueKind.STRING, ValueKind.SEQUENCE, ValueKind.MAPPING):
            return len(self.data) == 0
        return False

    def is_component(self) -> bool:
        """Whether this is a mapping carrying a boolean ``enabled`` key."""
        if self.kind is not ValueKind.MAPPING:
            return False
        enabled = self.data.get("enabled")
        return enabled is not None and enabled.kind is ValueKind.BOOL

    def component_enabled(self) -> bool | None:
        """The ``enabled`` flag of a component, or None if not a component."""
        if not self.is_component():
            return None
        return self.data["enabled"].data

    def to_python(self) -> Any:
        """Convert back to plain JSON-compatible Python data."""
        if self.kind is ValueKind.SEQUENCE:
            return [item.to_python() for item in self.data]
        if self.kind is ValueKind.MAPPING:
            return {key: child.to_python() for key, child in self.data.items()}
        return self.data


def _convert_entries(obj: dict[Any, Any]) -> dict[str, Value]:
    entries: dict[str, Value] = {}
    for key, child in obj.items():
        name = _key_to_str(key)
        if name in entries:
            logger.warning(
                "Mapping key %r collides with an earlier key rendered as %r; keeping the later value",
                key,
                name,
            )
        entries[name] = Value.from_python(child)
    return entries


def _key_to_str(key: Any) -> str:
    """Render a YAML mapping key as a string."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, (datetime, date)):
        return key.isoformat()
    return str(key)
