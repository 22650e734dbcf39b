"""
Field Definitions

Static, caller-supplied schema entries. A ``FieldDefinition`` names a
field, declares its type and optional default, and lists the fields it
depends on. ``FieldSchema`` owns an ordered set of definitions and the
dependency graph derived from them.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

from fastcore.basics import listify
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from .errors import DependencyCycleError, SchemaError
from .graph import DependencyGraph
from .types import FieldType

logger = logging.getLogger(__name__)


class FieldDefinition(BaseModel):
    """A named, typed field synchronized with the external store."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    type: FieldType = FieldType.STRING
    default_value: Any = Field(default=None, alias="defaultValue")
    depends_on: Tuple[str, ...] = Field(default=(), alias="dependsOn")

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value):
        return FieldType(value) if isinstance(value, str) else value

    @field_validator("depends_on", mode="before")
    @classmethod
    def _normalize_depends_on(cls, value):
        # Accept a bare name, keep declaration order and drop repeats
        return tuple(dict.fromkeys(listify(value)))

    @field_validator("default_value")
    @classmethod
    def _check_default_type(cls, value, info: ValidationInfo):
        field_type = info.data.get("type")
        if value is None or field_type is None:
            return value

        if field_type is FieldType.STRING:
            valid = isinstance(value, str)
        elif field_type is FieldType.NUMBER:
            valid = isinstance(value, (int, float)) and not isinstance(value, bool)
        elif field_type is FieldType.BOOLEAN:
            valid = isinstance(value, bool)
        else:
            valid = isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)

        if not valid:
            raise ValueError(f"Default value {value!r} does not match type '{field_type.value}'")
        return list(value) if isinstance(value, tuple) else value

    @property
    def has_default(self) -> bool:
        return self.default_value is not None


FieldLike = Union[FieldDefinition, Dict[str, Any]]


class FieldSchema:
    """
    Immutable, ordered collection of field definitions.

    The dependency graph is built once, when the schema is created. Cycles
    are rejected unless ``allow_cycles`` is set; dependencies on names that
    are not in the schema are ignored.
    """

    def __init__(self, fields: Iterable[FieldLike], allow_cycles: bool = False):
        definitions = []
        for entry in fields:
            if isinstance(entry, FieldDefinition):
                definitions.append(entry)
                continue
            try:
                definitions.append(FieldDefinition.model_validate(entry))
            except ValidationError as e:
                raise SchemaError(f"Invalid field definition {entry!r}: {e}") from e

        self._fields: Dict[str, FieldDefinition] = {}
        for definition in definitions:
            if definition.name in self._fields:
                raise SchemaError(f"Duplicate field name: '{definition.name}'")
            self._fields[definition.name] = definition

        self._graph = DependencyGraph(self._fields.values())

        if not allow_cycles:
            cycle = self._graph.find_cycle()
            if cycle:
                raise DependencyCycleError(cycle)

        logger.debug(f"FieldSchema created with {len(self._fields)} fields")

    @classmethod
    def from_dicts(cls, fields: Iterable[Dict[str, Any]], allow_cycles: bool = False) -> 'FieldSchema':
        """Build a schema from plain dicts (camelCase keys accepted)."""
        return cls(list(fields), allow_cycles=allow_cycles)

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._fields)

    def get(self, name: str) -> Optional[FieldDefinition]:
        return self._fields.get(name)

    def field_type(self, name: str) -> Optional[FieldType]:
        definition = self._fields.get(name)
        return definition.type if definition else None

    def dependents(self, name: str) -> Tuple[str, ...]:
        return self._graph.dependents(name)

    def __getitem__(self, name: str) -> FieldDefinition:
        return self._fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldSchema({list(self._fields)})"
