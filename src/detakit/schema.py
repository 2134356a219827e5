"""Pydantic schemas for Base records, paged responses and upload sessions."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .constants import EXPIRES_FIELD
from .exceptions import PayloadError, SerializationError


class Record(BaseModel):
    key: Optional[str] = Field(None, description="Record key; generated server-side when omitted.")
    value: Any = Field(default_factory=dict, description="Record body; non-dict values are stored under 'value'.")
    expires_in: Optional[int] = Field(None, description="Seconds from now after which the record expires.")
    expires_at: Optional[datetime] = Field(None, description="Absolute expiry time.")

    def expires_timestamp(self) -> Optional[int]:
        """Unix timestamp for `__expires`; `expires_in` wins over `expires_at`."""
        if self.expires_in is not None:
            return int(datetime.now(timezone.utc).timestamp()) + self.expires_in
        if self.expires_at is not None:
            expires_at = self.expires_at
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            return int(expires_at.timestamp())
        return None

    def to_payload(self) -> Dict[str, Any]:
        """Flatten into the item dict sent on the wire."""
        if isinstance(self.value, dict):
            data = dict(self.value)
        else:
            data = {"value": self.value}
        if self.key is not None:
            data["key"] = self.key
        expires = self.expires_timestamp()
        if expires is not None:
            data[EXPIRES_FIELD] = expires
        return data

    @classmethod
    def from_any(cls, item: Union["Record", Dict[str, Any], Any], **kwargs: Any) -> "Record":
        """Create a Record from a Record, a dict, or a bare value.

        Examples:
            Record.from_any({"key": "a", "name": "x"})
            Record.from_any("hello", key="greeting", expires_in=60)
        """
        if isinstance(item, Record):
            if kwargs:
                return item.model_copy(update=kwargs)
            return item
        if isinstance(item, dict):
            value = dict(item)
            key = kwargs.pop("key", None) or value.pop("key", None)
            value.pop("key", None)
            if key is not None and not isinstance(key, str):
                raise PayloadError("Record key must be a string", key=key)
            return cls(key=key, value=value, **kwargs)
        return cls(value=item, **kwargs)


class Paging(BaseModel):
    size: int = 0
    last: str = ""

    @property
    def has_more(self) -> bool:
        return bool(self.last)


class QueryResult(BaseModel):
    paging: Paging = Field(default_factory=Paging)
    items: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)


class FileList(BaseModel):
    paging: Optional[Paging] = None
    names: List[str] = Field(default_factory=list)

    @property
    def last(self) -> str:
        return self.paging.last if self.paging else ""


class UploadSession(BaseModel):
    """State of one chunked upload, owned by a single `put` call."""

    upload_id: str
    target_name: str
    parts_uploaded: List[int] = Field(default_factory=list)
    failed_parts: List[int] = Field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return bool(self.parts_uploaded) and not self.failed_parts


def parse_model(model: type, data: Any, **context: Any) -> Any:
    """Validate a decoded response body, mapping failures to SerializationError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SerializationError(f"Unexpected response shape for {model.__name__}", errors=e.errors(), **context) from e
