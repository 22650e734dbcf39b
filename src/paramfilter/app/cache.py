"""
Value Cache

Shadow copy of the last deserialized value observed for each field. The
reconciler compares the store against it to detect transitions; nothing
else reads it.
"""

from typing import Dict, Optional, Tuple

from ..core.codec import FieldValue


class ValueCache:
    """
    Last observed typed value per field, plus clear marks.

    A clear mark records that the reconciler deleted a field from the store
    and has not yet observed the result. Marking does not touch the stored
    value, so a cleared field that is itself a dependency is seen to change
    on the following pass.
    """

    def __init__(self):
        self._values: Dict[str, FieldValue] = {}
        self._cleared: Dict[str, None] = {}

    def observe(self, name: str, value: FieldValue) -> None:
        """Record ``value`` as the last observed value of ``name``."""
        self._values[name] = value
        self._cleared.pop(name, None)

    def get(self, name: str, default: Optional[FieldValue] = None) -> FieldValue:
        return self._values.get(name, default)

    def changed(self, name: str, current: FieldValue) -> bool:
        """True when ``current`` differs from the recorded value (or none is recorded)."""
        if name not in self._values:
            return True
        return self._values[name] != current

    def mark_cleared(self, name: str) -> None:
        self._cleared[name] = None

    def is_cleared(self, name: str) -> bool:
        return name in self._cleared

    @property
    def cleared(self) -> Tuple[str, ...]:
        return tuple(self._cleared)

    def clear(self) -> None:
        self._values.clear()
        self._cleared.clear()

    def as_dict(self) -> Dict[str, FieldValue]:
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ValueCache({self._values!r}, cleared={list(self._cleared)})"
