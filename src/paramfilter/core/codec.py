"""
Field Codec

Converts typed field values to and from the string representation held by
the external store. Decoding never raises: absent, empty or malformed raw
values all decode to ``None``.
"""

import math
from typing import Any, List, Optional, Union
from urllib.parse import unquote

from .types import FieldType

FieldValue = Union[str, int, float, bool, List[str], None]

DEFAULT_SEPARATOR = ","


def is_empty(value: Any) -> bool:
    """Values that are normalized to absence in the store."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _escape_item(item: str, separator: str) -> str:
    escaped = item.replace("%", "%25")
    for char in dict.fromkeys(separator):
        escaped = escaped.replace(char, "%{:02X}".format(ord(char)))
    return escaped


def _format_number(value: Any) -> str:
    try:
        if isinstance(value, float) and math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    except ValueError:
        # Integers past the interpreter's digit limit have no decimal text
        return ""


def _parse_number(raw: str) -> Optional[Union[int, float]]:
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def serialize(value: Any, field_type: FieldType, *, separator: str = DEFAULT_SEPARATOR,
              escape: bool = False) -> str:
    """
    Serialize a typed value into its store string.

    Args:
        value: Typed value to serialize
        field_type: Declared type of the field
        separator: Item separator for array fields
        escape: Percent-encode ``%`` and the separator inside array items

    Returns:
        String representation; empty values serialize to ``""``
    """
    field_type = FieldType(field_type)

    if value is None:
        return ""
    if field_type is FieldType.ARRAY:
        if isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            items = [str(item) for item in value]
            if escape:
                items = [_escape_item(item, separator) for item in items]
            return separator.join(items)
        return str(value)
    if field_type is FieldType.BOOLEAN:
        return "true" if value else "false"
    if field_type is FieldType.NUMBER:
        return _format_number(value)
    return str(value)


def deserialize(raw: Optional[str], field_type: FieldType, *, separator: str = DEFAULT_SEPARATOR,
                escape: bool = False) -> FieldValue:
    """
    Deserialize a store string into a typed value.

    Args:
        raw: Raw store value, or ``None`` when the key is absent
        field_type: Declared type of the field
        separator: Item separator for array fields
        escape: Undo the percent-encoding applied by ``serialize``

    Returns:
        Typed value, or ``None`` for absent, empty or unparsable input
    """
    if not raw:
        return None

    field_type = FieldType(field_type)

    if field_type is FieldType.NUMBER:
        return _parse_number(raw)
    if field_type is FieldType.BOOLEAN:
        return raw == "true"
    if field_type is FieldType.ARRAY:
        items = raw.split(separator)
        if escape:
            items = [unquote(item) for item in items]
        return items
    return raw


class FieldCodec:
    """Codec bound to one separator/escaping configuration."""

    def __init__(self, separator: str = DEFAULT_SEPARATOR, escape: bool = False):
        if not separator:
            raise ValueError("Array separator must not be empty")
        if escape and "%" in separator:
            raise ValueError("Array separator must not contain '%' when escaping is enabled")
        self.separator = separator
        self.escape = escape

    def serialize(self, value: Any, field_type: FieldType) -> str:
        return serialize(value, field_type, separator=self.separator, escape=self.escape)

    def deserialize(self, raw: Optional[str], field_type: FieldType) -> FieldValue:
        return deserialize(raw, field_type, separator=self.separator, escape=self.escape)

    def __repr__(self) -> str:
        return f"FieldCodec(separator={self.separator!r}, escape={self.escape})"


__all__ = [
    "FieldValue", "FieldCodec", "DEFAULT_SEPARATOR",
    "serialize", "deserialize", "is_empty",
]
