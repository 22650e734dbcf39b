from enum import Enum


class FieldType(str, Enum):
    """Value types a field can carry through the string-only store."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"

    @classmethod
    def _missing_(cls, value):
        # "array-of-string" is the long spelling used by some schemas
        if value == "array-of-string":
            return cls.ARRAY
        return None
