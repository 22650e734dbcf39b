"""
ParamFilter Persistence Module

Store backends field values are synchronized with.
"""

from .base import ParamStore, StoreTransaction, StoreListener
from .memory import MemoryParamStore
from .query_string import QueryStringStore, parse_query_string

__all__ = [
    "ParamStore",
    "StoreTransaction",
    "StoreListener",
    "MemoryParamStore",
    "QueryStringStore",
    "parse_query_string",
]
