"""
Field Accessor

Public read/write surface over the store: a typed snapshot of every field
and setters that write values back through the codec.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

from ..core.codec import FieldCodec, FieldValue, is_empty
from ..core.fields import FieldSchema
from ..core.types import FieldType
from ..persistence.base import ParamStore

logger = logging.getLogger(__name__)


class FieldSnapshot(Mapping):
    """
    Immutable mapping of field names to typed values.

    Array values are handed out as fresh lists, so changing a value read
    from the snapshot never alters the snapshot itself.
    """

    def __init__(self, values: Dict[str, FieldValue]):
        self._values = {
            name: tuple(value) if isinstance(value, list) else value
            for name, value in values.items()
        }

    def __getitem__(self, name: str) -> FieldValue:
        value = self._values[name]
        return list(value) if isinstance(value, tuple) else value

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FieldSnapshot({dict(self)!r})"


class FieldAccessor:
    """
    Typed view of the store for consumers.

    The snapshot is recomputed only when the schema or the store version
    changed since it was last built.
    """

    def __init__(self, schema: FieldSchema, store: ParamStore, codec: Optional[FieldCodec] = None):
        self.schema = schema
        self.store = store
        self.codec = codec or FieldCodec()

        self._snapshot: Optional[FieldSnapshot] = None
        self._snapshot_schema: Optional[FieldSchema] = None
        self._snapshot_version = -1

    def snapshot(self) -> FieldSnapshot:
        """Read-only mapping of every field to its current typed value."""
        version = self.store.version
        if self._snapshot is None or self._snapshot_schema is not self.schema or self._snapshot_version != version:
            values = {
                definition.name: self.codec.deserialize(self.store.get(definition.name), definition.type)
                for definition in self.schema
            }
            self._snapshot = FieldSnapshot(values)
            self._snapshot_schema = self.schema
            self._snapshot_version = version
        return self._snapshot

    def get(self, name: str) -> FieldValue:
        return self.snapshot().get(name)

    def _encode(self, key: str, value: Any) -> Optional[str]:
        """Store string for ``value``, or None when the entry must be deleted."""
        if is_empty(value):
            return None

        field_type = self.schema.field_type(key)
        if field_type is None:
            # Not part of the schema: booleans and lists keep their codec text
            if isinstance(value, bool):
                field_type = FieldType.BOOLEAN
            elif isinstance(value, (list, tuple)):
                field_type = FieldType.ARRAY
            else:
                field_type = FieldType.STRING
        raw = self.codec.serialize(value, field_type)
        return raw or None

    def set_field(self, key: str, value: Any) -> None:
        """
        Write a single field to the store.

        Empty values (None, "", empty list) delete the entry.
        """
        raw = self._encode(key, value)
        if raw is None:
            logger.debug(f"Deleting '{key}'")
            self.store.delete(key)
        else:
            logger.debug(f"Setting '{key}' = {raw!r}")
            self.store.set(key, raw)

    def set_fields(self, values: Mapping[str, Any]) -> None:
        """Write several fields as one store mutation."""
        with self.store.transaction() as tx:
            for key, value in values.items():
                raw = self._encode(key, value)
                if raw is None:
                    tx.delete(key)
                else:
                    tx.set(key, raw)

    def clear_field(self, key: str) -> None:
        self.set_field(key, None)
