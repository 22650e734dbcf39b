"""
ParamFilter Persistence Layer - Memory Backend

In-memory store implementation for tests and server-side use.
"""

from typing import Dict, List, Optional, Tuple

from .base import ParamStore, StoreItems, _pairs


class MemoryParamStore(ParamStore):
    """
    Insertion-ordered, in-memory key/value store.

    Overwriting an existing key keeps its position; deleting and setting it
    again moves it to the end.
    """

    def __init__(self, items: Optional[StoreItems] = None):
        super().__init__()
        self._data: Dict[str, str] = dict(_pairs(items)) if items else {}

    def _read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _write(self, key: str, value: str) -> None:
        self._data[key] = value

    def _remove(self, key: str) -> None:
        del self._data[key]

    def _items(self) -> List[Tuple[str, str]]:
        return list(self._data.items())

    def _clear(self) -> None:
        self._data.clear()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._data!r})"
