"""Partial-update payload builder for `PATCH /items/{key}`."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .exceptions import PayloadError, UnboundBuilderError
from .utils import validate_key

if TYPE_CHECKING:
    from .base import Base

Number = Union[int, float]


class Operation(str, Enum):
    SET = "set"
    INCREMENT = "increment"
    APPEND = "append"
    PREPEND = "prepend"
    DELETE = "delete"


class Updater:
    """Accumulates update operations for one record.

    `set`, `increment`, `append` and `prepend` map a field to a value (a later
    call on the same field wins); `delete` collects field names. Only
    non-empty operations are sent. A field may not be deleted and updated in
    the same request.

    Example:
        base.updater("user-1").set("name", "Ada").increment("logins").append("tags", "admin").commit()
    """

    def __init__(self, key: str, base: Optional["Base"] = None) -> None:
        self.key = validate_key(key)
        self._base = base
        self._updates: Dict[Operation, Dict[str, Any]] = {
            Operation.SET: {},
            Operation.INCREMENT: {},
            Operation.APPEND: {},
            Operation.PREPEND: {},
        }
        self._delete: List[str] = []

    def __repr__(self) -> str:
        return f"<Updater {self.key!r}: {self.to_dict()}>"

    def set(self, field: str, value: Any) -> "Updater":
        self._updates[Operation.SET][field] = value
        return self

    def increment(self, field: str, value: Number = 1) -> "Updater":
        """Increment a numeric field; use a negative value to decrement."""
        self._updates[Operation.INCREMENT][field] = value
        return self

    def append(self, field: str, value: Any) -> "Updater":
        """Append to a list field; a non-list value is appended as one element."""
        self._updates[Operation.APPEND][field] = value if isinstance(value, list) else [value]
        return self

    def prepend(self, field: str, value: Any) -> "Updater":
        """Prepend to a list field; a non-list value is prepended as one element."""
        self._updates[Operation.PREPEND][field] = value if isinstance(value, list) else [value]
        return self

    def delete(self, *fields: str) -> "Updater":
        for field in fields:
            if field not in self._delete:
                self._delete.append(field)
        return self

    @property
    def is_empty(self) -> bool:
        return not self._delete and not any(self._updates.values())

    def to_dict(self) -> Dict[str, Any]:
        """Return the PATCH body with only the non-empty operations.

        Raises:
            PayloadError: If a field is both deleted and updated
        """
        payload: Dict[str, Any] = {}
        for operation, fields in self._updates.items():
            if fields:
                payload[operation.value] = dict(fields)
        if self._delete:
            updated = {field for fields in self._updates.values() for field in fields}
            conflicts = sorted(updated.intersection(self._delete))
            if conflicts:
                raise PayloadError("Fields cannot be deleted and updated in one request", fields=conflicts)
            payload[Operation.DELETE.value] = list(self._delete)
        return payload

    def commit(self) -> Dict[str, Any]:
        """Send the update to the bound Base."""
        if self._base is None:
            raise UnboundBuilderError("Updater is not bound to a Base", key=self.key)
        return self._base.update(self)
