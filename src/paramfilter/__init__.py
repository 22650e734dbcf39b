"""
ParamFilter - Dependency-aware field state over query-string stores

Keeps typed, named fields synchronized with a string-only key/value store
(typically a URL query string). Fields declare which other fields they
depend on; when a field changes, its dependents are cleared from the store.
"""

from .core import (
    FieldType, FieldDefinition, FieldSchema, FieldCodec, DependencyGraph,
    serialize, deserialize, is_empty,
    ParamFilterError, SchemaError, DependencyCycleError,
)
from .persistence import ParamStore, StoreTransaction, MemoryParamStore, QueryStringStore
from .app import ValueCache, Reconciler, ReconcilerState, FieldAccessor, FieldSnapshot, ParamsFilter, use_params_filter
from .config import FilterConfig, LoggingConfig, configure_logging, get_config, set_config

__version__ = "0.1.0"

__all__ = [
    # Core
    'FieldType',
    'FieldDefinition',
    'FieldSchema',
    'FieldCodec',
    'DependencyGraph',
    'serialize',
    'deserialize',
    'is_empty',

    # Errors
    'ParamFilterError',
    'SchemaError',
    'DependencyCycleError',

    # Stores
    'ParamStore',
    'StoreTransaction',
    'MemoryParamStore',
    'QueryStringStore',

    # Application layer
    'ValueCache',
    'Reconciler',
    'ReconcilerState',
    'FieldAccessor',
    'FieldSnapshot',
    'ParamsFilter',
    'use_params_filter',

    # Configuration
    'FilterConfig',
    'LoggingConfig',
    'configure_logging',
    'get_config',
    'set_config',
]
