"""
Application Layer

Reconciliation loop, value cache and the consumer-facing accessor.
"""

from .cache import ValueCache
from .reconciler import Reconciler, ReconcilerState
from .accessor import FieldAccessor, FieldSnapshot
from .filter import ParamsFilter, use_params_filter

__all__ = [
    "ValueCache",
    "Reconciler",
    "ReconcilerState",
    "FieldAccessor",
    "FieldSnapshot",
    "ParamsFilter",
    "use_params_filter",
]
