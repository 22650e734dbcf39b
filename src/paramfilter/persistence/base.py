"""
ParamFilter Persistence Layer - Base Classes

This module provides the abstract contract of the external key/value store
that field values are synchronized with, and the transaction object used to
commit several changes as a single store mutation.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

StoreListener = Callable[['ParamStore'], None]
StoreItems = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def _pairs(items: StoreItems) -> List[Tuple[str, str]]:
    if isinstance(items, Mapping):
        items = items.items()
    return [(str(key), str(value)) for key, value in items]


class StoreTransaction:
    """
    Collects sets and deletes and commits them as one store mutation.

    Usage:
        with store.transaction() as tx:
            tx.set("country", "es")
            tx.delete("city")
            # Commit happens automatically on successful exit
            # Rollback happens automatically on exceptions
    """

    def __init__(self, store: 'ParamStore'):
        self.store = store
        self._changes: Dict[str, Optional[str]] = {}
        self._is_committed = False
        self._is_rolled_back = False

    @property
    def is_active(self) -> bool:
        return not (self._is_committed or self._is_rolled_back)

    @property
    def changes(self) -> List[Tuple[str, Optional[str]]]:
        """Pending ``(key, value)`` changes; ``None`` marks a deletion."""
        return list(self._changes.items())

    def _check_active(self):
        if not self.is_active:
            raise RuntimeError("Transaction is no longer active")

    def get(self, key: str) -> Optional[str]:
        """Read a key, seeing this transaction's pending changes."""
        if key in self._changes:
            return self._changes[key]
        return self.store.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_active()
        self._changes[str(key)] = str(value)

    def delete(self, key: str) -> None:
        self._check_active()
        self._changes[str(key)] = None

    def commit(self) -> bool:
        """
        Apply all pending changes to the store.

        Returns:
            True if the store was mutated, False if nothing changed
        """
        self._check_active()
        self._is_committed = True
        return self.store._commit(self.changes)

    def rollback(self) -> None:
        """Discard pending changes."""
        if self.is_active:
            self._changes.clear()
            self._is_rolled_back = True

    def __enter__(self) -> 'StoreTransaction':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        elif self.is_active:
            self.commit()


class ParamStore(ABC):
    """
    Abstract base class for the external string-keyed store.

    Implementations provide raw storage; this class adds change detection,
    versioning and synchronous change notification. Every committed
    mutation increments ``version`` once and notifies every subscriber
    once, however many keys it touched. Writing a value that is already
    stored, or deleting a missing key, is not a mutation. Mutations made
    by a listener while notifications are being delivered are announced
    after the current round, so every listener sees them in commit order.
    """

    def __init__(self):
        self._listeners: List[StoreListener] = []
        self._version = 0
        self._notifying = False
        self._pending_notifications = 0
        self._logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    def _read(self, key: str) -> Optional[str]:
        """Return the raw value stored under ``key``, or None."""
        pass

    @abstractmethod
    def _write(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""
        pass

    @abstractmethod
    def _remove(self, key: str) -> None:
        """Remove ``key``; only called for keys that exist."""
        pass

    @abstractmethod
    def _items(self) -> List[Tuple[str, str]]:
        """Return all entries in store order."""
        pass

    @abstractmethod
    def _clear(self) -> None:
        """Remove every entry."""
        pass

    @property
    def version(self) -> int:
        """Number of mutations committed so far."""
        return self._version

    def get(self, key: str) -> Optional[str]:
        return self._read(key)

    def set(self, key: str, value: str) -> bool:
        return self._commit([(str(key), str(value))])

    def delete(self, key: str) -> bool:
        return self._commit([(str(key), None)])

    def update(self, items: StoreItems) -> bool:
        """Set several keys as one mutation."""
        return self._commit(_pairs(items))

    def replace(self, items: StoreItems) -> bool:
        """
        Replace the whole content of the store as one mutation.

        This is how outside actors such as navigation rewrite the store.
        """
        new_items = list(dict(_pairs(items)).items())
        if new_items == self._items():
            return False
        self._clear()
        for key, value in new_items:
            self._write(key, value)
        self._committed(len(new_items))
        return True

    def to_snapshot(self) -> List[Tuple[str, str]]:
        """Ordered ``(key, value)`` pairs currently held."""
        return list(self._items())

    def keys(self) -> List[str]:
        return [key for key, _ in self._items()]

    def transaction(self) -> StoreTransaction:
        return StoreTransaction(self)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """
        Register a listener called with the store after every mutation.

        Returns:
            Function removing the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def _commit(self, changes: List[Tuple[str, Optional[str]]]) -> bool:
        effective = []
        for key, value in changes:
            current = self._read(key)
            if value is None and current is None:
                continue
            if value is not None and current == value:
                continue
            effective.append((key, value))

        if not effective:
            return False

        for key, value in effective:
            if value is None:
                self._remove(key)
            else:
                self._write(key, value)
        self._committed(len(effective))
        return True

    def _committed(self, touched: int) -> None:
        self._version += 1
        self._logger.debug(f"Committed mutation v{self._version} touching {touched} key(s)")

        # Mutations made by a listener are delivered after the current round
        self._pending_notifications += 1
        if self._notifying:
            return

        self._notifying = True
        try:
            while self._pending_notifications:
                self._pending_notifications -= 1
                for listener in list(self._listeners):
                    listener(self)
        except Exception:
            self._pending_notifications = 0
            raise
        finally:
            self._notifying = False

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._read(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._items())
