"""Normalization of loosely typed Subsonic JSON values.

Subsonic builds its JSON output by converting its XML output, which loses
type fidelity in two ways:

- A container holding one item is emitted as a single object, while a
  container holding several items is emitted as an array. An empty
  container is either omitted or emitted as an empty string.
- Text fields that look like numbers or booleans are emitted as JSON
  numbers or booleans. An album named "1984" arrives as ``1984`` and an
  artist named "True" arrives as ``true``.

Everything in this module works on plain decoded JSON values and either
returns a canonical Python value or raises one of ShapeError,
CoercionError or BuildError.

Example:
    >>> normalize_list({"id": 1}, "musicFolder", "getMusicFolders")
    [{'id': 1}]
    >>> coerce_to_string(1984, "album")
    '1984'
    >>> coerce_to_string(True, "artist")
    'True'
"""

import html
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import BuildError, CoercionError, ShapeError

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

# YYYY-MM-DDTHH:MM:SS, optional fraction, optional trailing Z
_TIMESTAMP_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,6})\d*)?Z?$"
)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def normalize_list(
    value: Any, field: str, operation: str, allow_blank: bool = False
) -> List[Dict[str, Any]]:
    """Turn a container field into an ordered list of item mappings.

    Args:
        value: Raw decoded value of the field (None when absent)
        field: Field name, used in error messages
        operation: API operation, used in error messages
        allow_blank: Treat an empty string as "no items"

    Returns:
        List of item mappings, in document order

    Raises:
        ShapeError: If value is a scalar (or a non-blank string)
    """
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [dict(value)]
    if isinstance(value, list):
        items = []
        for index, element in enumerate(value):
            if isinstance(element, Mapping):
                items.append(dict(element))
            else:
                logger.debug(
                    f"Skipping non-object element {index} of {operation}.{field}: "
                    f"{_type_name(element)}"
                )
        return items
    if allow_blank and isinstance(value, str) and not value.strip():
        return []
    raise ShapeError(field, operation, _type_name(value))


def coerce_to_string(value: Any, field: str) -> str:
    """Return the canonical text of a string-typed field.

    Priority: null -> "", boolean -> "True"/"False", string -> HTML-unescaped,
    number -> base-10 integer (fractions truncated).

    Raises:
        CoercionError: For arrays, objects and other types
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, str):
        return html.unescape(value)
    if isinstance(value, (int, float)):
        try:
            return str(int(value))
        except (OverflowError, ValueError):
            raise CoercionError(field, _type_name(value)) from None
    raise CoercionError(field, _type_name(value))


def coerce_to_int(value: Any, field: str) -> int:
    """Return the 64-bit integer encoded by a number or numeric string.

    Raises:
        CoercionError: For booleans, non-numeric strings, non-finite or
            out-of-range numbers, and other types
    """
    if isinstance(value, bool):
        raise CoercionError(field, "boolean")
    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        try:
            result = int(value)
        except (OverflowError, ValueError):
            raise CoercionError(field, "number") from None
    elif isinstance(value, str):
        text = value.strip()
        if not _INTEGER_PATTERN.match(text):
            raise CoercionError(field, "string")
        result = int(text)
    else:
        raise CoercionError(field, _type_name(value))

    if not INT64_MIN <= result <= INT64_MAX:
        raise CoercionError(field, "number")
    return result


def coerce_to_bool(value: Any, field: str) -> bool:
    """Return a boolean flag, accepting "true"/"false" strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise CoercionError(field, _type_name(value))


def require(item: Mapping[str, Any], field: str, entity: str) -> Any:
    """Return a required field's raw value.

    Raises:
        BuildError: If the field is absent or null
    """
    value = item.get(field)
    if value is None:
        raise BuildError(entity, field)
    return value


def optional_int(item: Mapping[str, Any], field: str) -> Optional[int]:
    """Return an optional integer field, or None when absent or mistyped."""
    value = item.get(field)
    if value is None:
        return None
    try:
        return coerce_to_int(value, field)
    except CoercionError:
        logger.debug(f"Ignoring optional field {field!r} of type {_type_name(value)}")
        return None


def optional_str(item: Mapping[str, Any], field: str) -> Optional[str]:
    """Return an optional text field, or None when absent or mistyped."""
    value = item.get(field)
    if value is None:
        return None
    try:
        return coerce_to_string(value, field)
    except CoercionError:
        logger.debug(f"Ignoring optional field {field!r} of type {_type_name(value)}")
        return None


def parse_timestamp(value: Any, field: str) -> datetime:
    """Parse a server timestamp into an aware UTC datetime.

    Accepts ``YYYY-MM-DDTHH:MM:SS`` with or without a trailing ``Z``; the
    server is inconsistent about the suffix across operations. A fractional
    seconds part is also accepted.

    Raises:
        CoercionError: If value is not a string in that format
    """
    if not isinstance(value, str):
        raise CoercionError(field, _type_name(value))
    match = _TIMESTAMP_PATTERN.match(value.strip())
    if not match:
        raise CoercionError(field, "string")

    year, month, day, hour, minute, second, fraction = match.groups()
    microsecond = int(fraction.ljust(6, "0")) if fraction else 0
    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            microsecond,
            tzinfo=timezone.utc,
        )
    except ValueError:
        raise CoercionError(field, "string") from None


def parse_duration(value: Any, field: str) -> timedelta:
    """Convert an integer count of seconds into a timedelta."""
    return timedelta(seconds=coerce_to_int(value, field))
