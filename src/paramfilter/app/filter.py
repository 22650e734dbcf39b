"""
ParamsFilter

Wires a field schema to a store: builds the reconciler and accessor,
subscribes the reconciler to store changes and runs the first pass.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from ..config import FilterConfig, get_config
from ..core.codec import FieldValue
from ..core.fields import FieldSchema, FieldLike
from ..persistence.base import ParamStore
from .accessor import FieldAccessor
from .reconciler import Reconciler

logger = logging.getLogger(__name__)


class ParamsFilter:
    """
    Dependency-aware field state synchronized with a store.

    Usage:
        store = QueryStringStore("country=es")
        params = ParamsFilter(store, [
            {"name": "country", "type": "string"},
            {"name": "city", "type": "string", "dependsOn": ["country"]},
            {"name": "page", "type": "number", "defaultValue": 1},
        ])
        params.set_field("country", "fr")   # clears "city"
        params.field_values["page"]         # 1
    """

    def __init__(self,
                 store: ParamStore,
                 fields: Union[FieldSchema, Iterable[FieldLike], None] = None,
                 config: Optional[FilterConfig] = None):
        self.config = config or get_config()
        self.store = store

        if isinstance(fields, FieldSchema):
            self.schema = fields
        else:
            self.schema = FieldSchema(fields or [], allow_cycles=self.config.allow_cycles)

        self.codec = self.config.make_codec()
        self.reconciler = Reconciler(self.schema, store, self.codec)
        self.accessor = FieldAccessor(self.schema, store, self.codec)

        self._unsubscribe = store.subscribe(self.reconciler.on_store_change)
        logger.info(f"ParamsFilter created for fields {list(self.schema.names)}")

        self.reconciler.reconcile()

    @property
    def field_values(self) -> Mapping[str, FieldValue]:
        return self.accessor.snapshot()

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def snapshot(self) -> Mapping[str, FieldValue]:
        return self.accessor.snapshot()

    def get(self, name: str) -> FieldValue:
        return self.accessor.get(name)

    def set_field(self, key: str, value: Any) -> None:
        self.accessor.set_field(key, value)

    def set_fields(self, values: Mapping[str, Any]) -> None:
        self.accessor.set_fields(values)

    def clear_field(self, key: str) -> None:
        self.accessor.clear_field(key)

    def reconcile(self) -> None:
        """Run a pass by hand, e.g. after a store change made while closed."""
        self.reconciler.reconcile()

    def close(self) -> None:
        """Stop following store changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.info("ParamsFilter closed")

    def __enter__(self) -> 'ParamsFilter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"ParamsFilter({dict(self.field_values)!r})"


def use_params_filter(store: ParamStore,
                      fields: Union[FieldSchema, Iterable[FieldLike], None] = None,
                      config: Optional[FilterConfig] = None) -> ParamsFilter:
    """Create a ``ParamsFilter`` bound to ``store``."""
    return ParamsFilter(store, fields, config)
