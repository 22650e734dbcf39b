"""
ParamFilter Core Module

Field definitions, codec and dependency graph. No store access happens here.
"""

from .types import FieldType
from .codec import FieldCodec, FieldValue, serialize, deserialize, is_empty
from .graph import DependencyGraph
from .fields import FieldDefinition, FieldSchema
from .errors import ParamFilterError, SchemaError, DependencyCycleError

__all__ = [
    "FieldType",
    "FieldCodec",
    "FieldValue",
    "serialize",
    "deserialize",
    "is_empty",
    "DependencyGraph",
    "FieldDefinition",
    "FieldSchema",
    "ParamFilterError",
    "SchemaError",
    "DependencyCycleError",
]
