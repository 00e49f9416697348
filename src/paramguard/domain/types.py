"""Field types, error kinds, and status classifications.

Type markers in rule declarations are loose (Python classes, or names
such as ``"string"`` and ``"integer"`` in rule files). They are resolved
once, at rule-build time, into the closed :class:`FieldType` enum.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any


class FieldType(StrEnum):
    """Semantic type a parameter value must have."""

    TEXT = "text"
    WHOLE_NUMBER = "whole_number"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIMESTAMP = "timestamp"
    OBJECT = "object"
    LIST = "list"


class ErrorKind(StrEnum):
    """Classification of a single field failure."""

    MISSING_REQUIRED = "missing_required"
    TYPE_MISMATCH = "type_mismatch"
    OUT_OF_RANGE = "out_of_range"
    FORMAT_MISMATCH = "format_mismatch"
    BLANK_DISALLOWED = "blank_disallowed"


class ErrorStatus(StrEnum):
    """Coarse status of a raised failure, independent of its message."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    UNPROCESSABLE = "unprocessable"

    @classmethod
    def _missing_(cls, value: object) -> ErrorStatus | None:
        # Rack-style symbol names, e.g. "unprocessable_entity".
        if isinstance(value, str) and value.lower() == "unprocessable_entity":
            return cls.UNPROCESSABLE
        return None


HTTP_STATUS_CODES: dict[ErrorStatus, int] = {
    ErrorStatus.BAD_REQUEST: 400,
    ErrorStatus.UNAUTHORIZED: 401,
    ErrorStatus.FORBIDDEN: 403,
    ErrorStatus.NOT_FOUND: 404,
    ErrorStatus.UNPROCESSABLE: 422,
}

# --- Marker resolution ---

# Order matters: datetime is a subclass of date, bool of int.
_CLASS_MARKERS: list[tuple[type, FieldType]] = [
    (bool, FieldType.BOOLEAN),
    (int, FieldType.WHOLE_NUMBER),
    (float, FieldType.DECIMAL),
    (Decimal, FieldType.DECIMAL),
    (str, FieldType.TEXT),
    (datetime, FieldType.TIMESTAMP),
    (date, FieldType.DATE),
    (dict, FieldType.OBJECT),
    (Mapping, FieldType.OBJECT),
    (list, FieldType.LIST),
    (tuple, FieldType.LIST),
]

_NAME_MARKERS: dict[str, FieldType] = {
    "text": FieldType.TEXT,
    "string": FieldType.TEXT,
    "str": FieldType.TEXT,
    "whole_number": FieldType.WHOLE_NUMBER,
    "integer": FieldType.WHOLE_NUMBER,
    "int": FieldType.WHOLE_NUMBER,
    "decimal": FieldType.DECIMAL,
    "float": FieldType.DECIMAL,
    "number": FieldType.DECIMAL,
    "boolean": FieldType.BOOLEAN,
    "bool": FieldType.BOOLEAN,
    "date": FieldType.DATE,
    "timestamp": FieldType.TIMESTAMP,
    "datetime": FieldType.TIMESTAMP,
    "time": FieldType.TIMESTAMP,
    "object": FieldType.OBJECT,
    "hash": FieldType.OBJECT,
    "dict": FieldType.OBJECT,
    "list": FieldType.LIST,
    "array": FieldType.LIST,
}


def resolve_type(marker: Any) -> FieldType | None:
    """Resolve a loose type marker into a :class:`FieldType`.

    Returns None for markers that name no known type, which leaves the
    owning rule inert rather than failing the build.

    Examples:
        >>> resolve_type(str)
        <FieldType.TEXT: 'text'>
        >>> resolve_type("Integer")
        <FieldType.WHOLE_NUMBER: 'whole_number'>
        >>> resolve_type(set) is None
        True
    """
    if isinstance(marker, FieldType):
        return marker
    if isinstance(marker, str):
        return _NAME_MARKERS.get(marker.strip().lower())
    if isinstance(marker, type):
        for cls, field_type in _CLASS_MARKERS:
            if marker is cls:
                return field_type
        for cls, field_type in _CLASS_MARKERS:
            if issubclass(marker, cls):
                return field_type
    return None


# --- Value checks ---


def _is_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _is_iso_timestamp(value: str) -> bool:
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def matches_type(value: Any, field_type: FieldType) -> bool:
    """Return True if *value* satisfies *field_type*.

    Booleans never count as numbers. DATE and TIMESTAMP also accept ISO-8601
    text, since decoded request parameters carry dates as strings.
    """
    match field_type:
        case FieldType.TEXT:
            return isinstance(value, str)
        case FieldType.WHOLE_NUMBER:
            return isinstance(value, int) and not isinstance(value, bool)
        case FieldType.DECIMAL:
            return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)
        case FieldType.BOOLEAN:
            return isinstance(value, bool)
        case FieldType.DATE:
            if isinstance(value, str):
                return _is_iso_date(value)
            return isinstance(value, date) and not isinstance(value, datetime)
        case FieldType.TIMESTAMP:
            if isinstance(value, str):
                return _is_iso_timestamp(value)
            return isinstance(value, datetime)
        case FieldType.OBJECT:
            return isinstance(value, Mapping)
        case FieldType.LIST:
            return isinstance(value, (list, tuple))
    return False
