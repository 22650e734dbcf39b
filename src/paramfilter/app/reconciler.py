"""
Reconciler

Keeps the value cache consistent with the external store and enforces
field dependencies: when a field's value changes, every field depending on
it is deleted from the store.

The first pass seeds missing fields with their defaults. Every later pass
compares each dependency against the cache and clears the dependents of
those that changed. Chains deeper than one level are cleared one level per
pass: the deletion of an intermediate field is itself a store mutation,
observed as a change by the next pass.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..core.codec import FieldCodec, FieldValue
from ..core.fields import FieldSchema
from ..persistence.base import ParamStore
from .cache import ValueCache

logger = logging.getLogger(__name__)


class ReconcilerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    STEADY = "steady"


class Reconciler:
    """
    Control loop between the store and the value cache.

    ``reconcile()`` is meant to be subscribed to store notifications.
    Notifications are synchronous, so a pass that writes to the store is
    re-entered; such re-entrant calls are queued and run as a follow-up
    pass once the current pass has finished.
    """

    def __init__(self,
                 schema: FieldSchema,
                 store: ParamStore,
                 codec: Optional[FieldCodec] = None,
                 cache: Optional[ValueCache] = None):
        self.schema = schema
        self.store = store
        self.codec = codec or FieldCodec()
        self.cache = cache if cache is not None else ValueCache()

        self.state = ReconcilerState.UNINITIALIZED
        self.passes = 0
        self.last_cleared: Tuple[str, ...] = ()

        self._running = False
        self._pending = False

    @property
    def initialized(self) -> bool:
        return self.state is ReconcilerState.STEADY

    def on_store_change(self, store: ParamStore) -> None:
        """Store listener entry point."""
        self.reconcile()

    def reconcile(self) -> None:
        """Run a reconciliation pass, plus any pass queued while it ran."""
        if self._running:
            self._pending = True
            return

        self._running = True
        try:
            self._pending = True
            while self._pending:
                self._pending = False
                self._run_pass()
        finally:
            self._running = False

    def reset(self) -> None:
        """Forget everything observed; the next pass initializes again."""
        self.state = ReconcilerState.UNINITIALIZED
        self.cache.clear()
        self.last_cleared = ()

    def _run_pass(self) -> None:
        self.passes += 1
        if self.state is ReconcilerState.UNINITIALIZED:
            logger.debug(f"Pass {self.passes}: initializing {len(self.schema)} fields")
            self._initialize()
            self.state = ReconcilerState.STEADY
        else:
            self.last_cleared = self._invalidate()

    def _current(self, name: str) -> FieldValue:
        return self.codec.deserialize(self.store.get(name), self.schema.field_type(name))

    def _initialize(self) -> None:
        defaults: Dict[str, str] = {}

        for definition in self.schema:
            raw = self.store.get(definition.name)
            if raw is not None:
                self.cache.observe(definition.name, self.codec.deserialize(raw, definition.type))
                continue

            serialized = ""
            if definition.has_default:
                serialized = self.codec.serialize(definition.default_value, definition.type)
            if serialized:
                defaults[definition.name] = serialized
            self.cache.observe(definition.name, self.codec.deserialize(serialized, definition.type))

        if defaults:
            logger.debug(f"Seeding defaults for {list(defaults)}")
            with self.store.transaction() as tx:
                for name, value in defaults.items():
                    tx.set(name, value)

    def _invalidate(self) -> Tuple[str, ...]:
        graph = self.schema.graph

        # Settle marks left by the previous pass on fields nobody depends on
        for name in self.cache.cleared:
            if not graph.has_dependents(name):
                self.cache.observe(name, self._current(name))

        to_delete: List[str] = []
        for dependency, dependents in graph.dependencies():
            current = self._current(dependency)
            if self.cache.changed(dependency, current):
                logger.debug(
                    f"Pass {self.passes}: '{dependency}' changed from "
                    f"{self.cache.get(dependency)!r} to {current!r}; clearing {list(dependents)}"
                )
                for name in dependents:
                    if name not in to_delete:
                        to_delete.append(name)
            self.cache.observe(dependency, current)

        # Marks go on after every dependency is observed so they survive the pass
        for name in to_delete:
            self.cache.mark_cleared(name)

        if to_delete:
            with self.store.transaction() as tx:
                for name in to_delete:
                    tx.delete(name)

        return tuple(to_delete)

    def __repr__(self) -> str:
        return f"Reconciler(state={self.state.value}, passes={self.passes})"
