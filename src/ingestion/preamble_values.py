"""
Typed values for front matter entries.

YAML front matter yields arbitrary scalars, dates and lists. Each parsed
value is classified once into a ``PreambleValue`` so that the projections
used by the pipeline (``name``, ``link``, ``path``) are explicit, total
conversions that return ``None`` for anything of the wrong shape.

Example:
    >>> value = classify(["Category", "Subcategory"])
    >>> value.kind
    <PreambleKind.STRING_ARRAY: 'string_array'>
    >>> as_string_array(value)
    ['Category', 'Subcategory']
    >>> as_string(value) is None
    True
"""

import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict


class PreambleKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    DATE = "date"
    STRING_ARRAY = "string_array"
    UNKNOWN = "unknown"


class PreambleValue(BaseModel):
    """A front matter value tagged with its kind; ``value`` is untouched."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: PreambleKind
    value: Any = None


def classify(raw: Any) -> PreambleValue:
    """
    Tag a raw YAML value with its kind.

    Args:
        raw: Value as produced by the YAML loader

    Returns:
        PreambleValue wrapping the raw value
    """
    # bool is a subclass of int, check it first
    if isinstance(raw, bool):
        kind = PreambleKind.BOOL
    elif isinstance(raw, (int, float)):
        kind = PreambleKind.NUMBER
    elif isinstance(raw, str):
        kind = PreambleKind.STRING
    elif isinstance(raw, (datetime.date, datetime.datetime)):
        kind = PreambleKind.DATE
    elif isinstance(raw, list) and all(isinstance(item, str) for item in raw):
        kind = PreambleKind.STRING_ARRAY
    else:
        kind = PreambleKind.UNKNOWN
    return PreambleValue(kind=kind, value=raw)


def classify_mapping(data: Mapping[Any, Any]) -> Dict[str, PreambleValue]:
    """Classify every entry of a parsed front matter mapping."""
    return {str(key): classify(value) for key, value in data.items()}


def as_string(value: Optional[PreambleValue]) -> Optional[str]:
    """Return the value as a non-empty string, or None."""
    if value is None or value.kind != PreambleKind.STRING:
        return None
    return value.value or None


def as_string_array(value: Optional[PreambleValue]) -> Optional[List[str]]:
    """Return the value as a list of strings, or None."""
    if value is None or value.kind != PreambleKind.STRING_ARRAY:
        return None
    return list(value.value)


def to_plain(value: PreambleValue) -> Any:
    """Return a JSON-friendly version of the value (dates as ISO strings)."""
    if value.kind == PreambleKind.DATE:
        return value.value.isoformat()
    if value.kind == PreambleKind.UNKNOWN:
        return _plain_unknown(value.value)
    return value.value


def _plain_unknown(raw: Any) -> Any:
    if isinstance(raw, (datetime.date, datetime.datetime)):
        return raw.isoformat()
    if isinstance(raw, list):
        return [_plain_unknown(item) for item in raw]
    if isinstance(raw, dict):
        return {str(k): _plain_unknown(v) for k, v in raw.items()}
    return raw
