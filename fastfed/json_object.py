"""Immutable, path-aware view over parsed JSON documents.

Every typed getter reports a wrong-typed value to the document's
:class:`~fastfed.errors.ErrorAccumulator` and then behaves as if the member
were absent, so a single pass over a document finds every violation.
"""

from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set

from .constants import PATH_DELIMITER
from .errors import ErrorAccumulator, InvalidMetadataError


def type_name(value: Any) -> str:
    """Return the JSON type name used in error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, (int, float)):
        return "Number"
    if isinstance(value, str):
        return "String"
    if isinstance(value, (list, tuple)):
        return "Array"
    if isinstance(value, dict):
        return "Object"
    return type(value).__name__


def _normalize(value: Any) -> Any:
    """Trim strings and collapse empty values to ``None``."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (list, tuple)):
        members = [_normalize(v) for v in value]
        members = [m for m in members if m is not None]
        return members or None
    if isinstance(value, dict):
        contents = {}
        for key, member in value.items():
            member = _normalize(member)
            if member is not None:
                contents[key] = member
        return contents or None
    return value


def _to_json_value(value: Any) -> Any:
    if isinstance(value, JsonObject):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return int(value.timestamp())
    if isinstance(value, (set, frozenset)):
        return sorted(_to_json_value(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items() if v is not None}
    return value


class JsonObject:
    """A normalized JSON object that remembers where it came from."""

    def __init__(
        self,
        contents: Optional[Mapping[str, Any]] = None,
        errors: Optional[ErrorAccumulator] = None,
        json_path: str = "",
    ) -> None:
        self._contents: Dict[str, Any] = _normalize(dict(contents or {})) or {}
        self._errors = errors if errors is not None else ErrorAccumulator()
        self._json_path = json_path

    # ------------------------------------------------------------------
    @property
    def errors(self) -> ErrorAccumulator:
        return self._errors

    @property
    def json_path(self) -> str:
        return self._json_path

    def fully_qualified_name(self, key: str) -> str:
        if not self._json_path:
            return key
        return f"{self._json_path}{PATH_DELIMITER}{key}"

    def keys(self) -> List[str]:
        return list(self._contents.keys())

    def contains_key(self, key: str) -> bool:
        """Return ``True`` when ``key`` holds a non-empty value."""
        return key in self._contents

    __contains__ = contains_key

    def only_contains_key(self, key: str) -> bool:
        return list(self._contents.keys()) == [key]

    def is_empty(self) -> bool:
        return not self._contents

    # ------------------------------------------------------------------
    def _report_type(self, key: str, expected: str, received: str) -> None:
        self._errors.add(
            f'Invalid type for "{self.fully_qualified_name(key)}" '
            f"(expected: {expected}, received: {received})"
        )

    def get_string(self, key: str) -> Optional[str]:
        value = self._contents.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            self._report_type(key, "String", type_name(value))
            return None
        return value

    def get_boolean(self, key: str) -> Optional[bool]:
        value = self._contents.get(key)
        if value is None:
            return None
        if not isinstance(value, bool):
            self._report_type(key, "Boolean", type_name(value))
            return None
        return value

    def get_integer(self, key: str) -> Optional[int]:
        value = self._contents.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self._report_type(key, "Number", type_name(value))
            return None
        if isinstance(value, float):
            if not value.is_integer():
                self._errors.add(
                    f'Invalid value for "{self.fully_qualified_name(key)}" '
                    f"({value} is not an integer)"
                )
                return None
            value = int(value)
        return value

    def get_datetime(self, key: str) -> Optional[datetime]:
        """Read a NumericDate (seconds since the epoch) as an aware UTC datetime."""
        seconds = self.get_integer(key)
        if seconds is None:
            return None
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            self._errors.add(
                f'Invalid value for "{self.fully_qualified_name(key)}" '
                f"({seconds} is not a valid date)"
            )
            return None

    def get_string_list(self, key: str) -> Optional[List[str]]:
        value = self._contents.get(key)
        if value is None:
            return None
        if not isinstance(value, list):
            self._report_type(key, "Array", type_name(value))
            return None
        for member in value:
            if not isinstance(member, str):
                self._report_type(
                    key,
                    "Array containing Strings",
                    f"Array containing {type_name(member)}s",
                )
                return None
        return list(value)

    def get_string_set(self, key: str) -> Optional[Set[str]]:
        members = self.get_string_list(key)
        if members is None:
            return None
        return set(members)

    def get_object(self, key: str) -> Optional["JsonObject"]:
        value = self._contents.get(key)
        if value is None:
            return None
        if not isinstance(value, dict):
            self._report_type(key, "Object", type_name(value))
            return None
        return JsonObject(value, self._errors, self.fully_qualified_name(key))

    def unwrap_object_if_needed(self, wrapper_name: str) -> "JsonObject":
        """Return the contents of ``{wrapper_name: {...}}``, or ``self`` if not wrapped."""
        if self.only_contains_key(wrapper_name) and isinstance(
            self._contents[wrapper_name], dict
        ):
            return JsonObject(
                self._contents[wrapper_name],
                self._errors,
                self.fully_qualified_name(wrapper_name),
            )
        return self

    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._contents)

    def to_json_string(self) -> str:
        return json.dumps(self._contents)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonObject):
            return NotImplemented
        return self._contents == other._contents

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonObject(path={self._json_path!r}, contents={self._contents!r})"

    def __str__(self) -> str:
        return self.to_json_string()


class JsonObjectBuilder:
    """Accumulates members and produces an immutable :class:`JsonObject`."""

    def __init__(self, wrapper_name: Optional[str] = None) -> None:
        self._wrapper_name = wrapper_name
        self._contents: Dict[str, Any] = {}

    def put(self, key: str, value: Any) -> "JsonObjectBuilder":
        if value is not None:
            self._contents[key] = _to_json_value(value)
        return self

    def put_all(self, other: Optional[JsonObject]) -> "JsonObjectBuilder":
        if other is not None:
            self._contents.update(other.to_dict())
        return self

    def build(self) -> JsonObject:
        if self._wrapper_name:
            return JsonObject({self._wrapper_name: self._contents})
        return JsonObject(self._contents)


def parse_json(
    text: Optional[str],
    errors: Optional[ErrorAccumulator] = None,
    json_path: str = "",
) -> JsonObject:
    """Parse ``text`` into a :class:`JsonObject`.

    Raises:
        InvalidMetadataError: if the text is empty, malformed, or not an object.
    """

    errors = errors if errors is not None else ErrorAccumulator()
    if text is None or not text.strip():
        errors.add("JSON is empty")
        raise InvalidMetadataError(errors)
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        errors.add(f"Malformed JSON: {exc}")
        raise InvalidMetadataError(errors) from exc
    if not isinstance(value, dict):
        errors.add(f"Malformed JSON. Expected an Object, received a {type_name(value)}")
        raise InvalidMetadataError(errors)
    return JsonObject(value, errors, json_path)
