"""
Helpers turning raw form and query strings into stored values.

Multipart form fields always arrive as strings.  The API does not
validate payloads beyond these coercions: values that cannot be parsed
fall back to a default instead of rejecting the request.  The one
exception is identifiers, which must be 24 hexadecimal characters.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from bson import ObjectId
from pydantic import TypeAdapter, ValidationError

from .errors import InvalidIdentifierError

_OBJECT_ID_RE = re.compile(r"[0-9a-fA-F]{24}")
_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")

# BSON stores integers in at most 8 bytes.
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1
_datetime_adapter = TypeAdapter(datetime)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_object_id(value: Any) -> bool:
    return isinstance(value, str) and _OBJECT_ID_RE.fullmatch(value) is not None


def parse_object_id(value: Any, message: str) -> ObjectId:
    """Return ``value`` as an ``ObjectId`` or raise ``InvalidIdentifierError``.

    ``bson.ObjectId.is_valid`` also accepts arbitrary 12 byte strings,
    so the 24-hex form is checked explicitly.
    """
    if not is_valid_object_id(value):
        raise InvalidIdentifierError(message)
    return ObjectId(value)


def to_int(value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    """Parse the leading integer of ``value`` (``"12abc"`` gives 12).

    Returns ``default`` when no digits lead the value or the number does
    not fit in a signed 64-bit integer.
    """
    if value is None:
        return default
    match = _LEADING_INT_RE.match(str(value))
    if match is None:
        return default
    digits = match.group(1)
    # Longer digit strings cannot fit in 64 bits.
    if len(digits) > 20:
        return default
    parsed = int(digits)
    if not INT64_MIN <= parsed <= INT64_MAX:
        return default
    return parsed


def to_positive_int(value: Optional[str], default: int) -> int:
    parsed = to_int(value)
    if parsed is None or parsed < 1:
        return default
    return parsed


def to_datetime(value: Optional[str], default: Optional[datetime] = None) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (or unix seconds).

    Naive values are taken as UTC so every stored timestamp is
    comparable with the server generated ones.
    """
    if not value:
        return default
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        return default
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_list(value: str) -> List[Any]:
    """Decode a JSON-encoded list.

    Malformed JSON raises ``json.JSONDecodeError`` and surfaces as a
    server error.  A scalar JSON value is wrapped in a one item list.
    """
    decoded = json.loads(value)
    if isinstance(decoded, list):
        return decoded
    return [decoded]


# name -> (coerce, value stored when the field is sent empty).  ``coerce``
# returns ``None`` for values it cannot parse.
FieldRules = Mapping[str, Tuple[Callable[[str], Any], Any]]


def collect_updates(fields: Mapping[str, str], rules: FieldRules) -> Dict[str, Any]:
    """Build a ``$set`` document from the form fields that were sent.

    Fields missing from the form are left alone.  A field sent as an
    empty string is reset to its empty value.  A field whose value
    cannot be coerced is skipped.
    """
    updates: Dict[str, Any] = {}
    for name, (coerce, empty) in rules.items():
        if name not in fields:
            continue
        raw = fields[name]
        if raw == "":
            updates[name] = empty
            continue
        value = coerce(raw)
        if value is not None:
            updates[name] = value
    return updates


def text(value: str) -> str:
    return value
