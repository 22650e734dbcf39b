"""
Dependency Graph

Derived, read-only mapping from a field name to the fields that declare a
dependency on it. Built once from the field definitions and never mutated.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .fields import FieldDefinition

logger = logging.getLogger(__name__)


class DependencyGraph:
    """
    Reverse index of ``depends_on`` declarations.

    ``dependents("country")`` returns every field listing ``country`` in its
    ``depends_on``, in the order those declarations were registered. Names
    that are not part of the schema register nothing.
    """

    def __init__(self, definitions: Iterable['FieldDefinition']):
        definitions = list(definitions)
        self._names: Tuple[str, ...] = tuple(d.name for d in definitions)
        known = set(self._names)

        dependents: Dict[str, List[str]] = {}
        self._missing: List[Tuple[str, str]] = []
        for definition in definitions:
            for dependency in definition.depends_on:
                if dependency not in known:
                    logger.warning(
                        f"Field '{definition.name}' depends on unknown field '{dependency}'; ignoring"
                    )
                    self._missing.append((definition.name, dependency))
                    continue
                dependents.setdefault(dependency, []).append(definition.name)

        self._dependents: Dict[str, Tuple[str, ...]] = {
            name: tuple(names) for name, names in dependents.items()
        }

    def dependents(self, name: str) -> Tuple[str, ...]:
        """Fields depending on ``name``; empty for fields nobody depends on."""
        return self._dependents.get(name, ())

    def dependencies(self) -> Iterator[Tuple[str, Tuple[str, ...]]]:
        """Yield ``(dependency, dependents)`` for every field with dependents, in schema order."""
        for name in self._names:
            if name in self._dependents:
                yield name, self._dependents[name]

    def has_dependents(self, name: str) -> bool:
        return name in self._dependents

    @property
    def missing(self) -> Tuple[Tuple[str, str], ...]:
        """``(field, unknown_dependency)`` pairs that were ignored."""
        return tuple(self._missing)

    def find_cycle(self) -> Optional[List[str]]:
        """Return a dependency cycle as a list of names, or ``None``."""
        visiting: List[str] = []
        done = set()

        def visit(name: str) -> Optional[List[str]]:
            if name in visiting:
                return visiting[visiting.index(name):] + [name]
            if name in done:
                return None
            visiting.append(name)
            for dependent in self.dependents(name):
                cycle = visit(dependent)
                if cycle:
                    return cycle
            visiting.pop()
            done.add(name)
            return None

        for name in self._names:
            cycle = visit(name)
            if cycle:
                return cycle
        return None

    def as_dict(self) -> Dict[str, Tuple[str, ...]]:
        """Mapping of every field to its dependents, empty tuples included."""
        return {name: self.dependents(name) for name in self._names}

    def __len__(self) -> int:
        return len(self._dependents)

    def __repr__(self) -> str:
        return f"DependencyGraph({self._dependents!r})"
