"""Utility functions for detakit.

Shared helpers for building request URLs and validating inputs.
"""

from typing import Any, Iterable, Iterator, List, Sequence, Tuple
from urllib.parse import quote

from .exceptions import InvalidProjectKeyError, PayloadError


def chunk_iter(seq: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    """Yield successive chunks from a sequence (works on bytes and lists)."""
    if size <= 0:
        yield seq
        return
    for i in range(0, len(seq), size):
        yield seq[i : i + size]


def quote_name(name: str) -> str:
    """Percent-encode a key or file name for embedding in a URL.

    Slashes are encoded too, so the result is always a single path segment
    or a single query value.
    """
    return quote(name, safe="")


def validate_key(key: Any, field: str = "key") -> str:
    """Return `key` if it is a non-empty string, else raise PayloadError."""
    if not isinstance(key, str) or not key:
        raise PayloadError(f"'{field}' must be a non-empty string", field=field, value=key)
    return key


def normalize_names(names: Any) -> List[str]:
    """Normalize a single name or an iterable of names to a list."""
    if isinstance(names, str):
        return [validate_key(names, field="name")]
    if isinstance(names, Iterable):
        return [validate_key(n, field="name") for n in names]
    raise PayloadError("names must be a string or an iterable of strings", value=names)


def split_project_key(project_key: str) -> Tuple[str, str]:
    """Split `<project_id>_<secret>` into its two parts.

    Raises:
        InvalidProjectKeyError: If the key does not have exactly two non-empty parts
    """
    parts = project_key.split("_") if isinstance(project_key, str) else []
    if len(parts) != 2 or not all(parts):
        raise InvalidProjectKeyError("Invalid project key", expected="<project_id>_<secret>")
    return parts[0], parts[1]
