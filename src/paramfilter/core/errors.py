"""
ParamFilter error hierarchy.

Malformed store values never raise; they degrade to ``None``. The errors
below are only raised while a field schema is being built.
"""

from typing import Sequence


class ParamFilterError(Exception):
    """Base exception for paramfilter errors"""
    pass


class SchemaError(ParamFilterError):
    """Raised when a field schema is invalid"""
    pass


class DependencyCycleError(SchemaError):
    """Raised when field dependencies form a cycle"""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = tuple(cycle)
        super().__init__(f"Dependency cycle detected: {' -> '.join(self.cycle)}")
