"""Filter predicates and their wire encoding.

A predicate is a field path, a comparator and a value. On the wire an
equality check is the bare field name and every other comparator is a
`field?op` key, e.g. `{"age?gte": 18, "name?pfx": "Jo"}`.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

__all__ = ("Comparator", "Filter", "encode_key", "parse_lookup")


class Comparator(str, Enum):
    EQUALS = "eq"
    NOT_EQUALS = "ne"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUALS = "gte"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUALS = "lte"
    RANGE = "range"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    PREFIX = "pfx"

    @property
    def suffix(self) -> Optional[str]:
        """Wire suffix after `?`; equality has none."""
        if self is Comparator.EQUALS:
            return None
        return self.value


# Nesting separator; underscores at the edges of a segment are kept
_SEPARATOR = re.compile(r"(?<=[^_])__(?=[^_])")

# Lookup names accepted by `Query.filter(field__lookup=value)`
_LOOKUPS: Dict[str, Comparator] = {c.value: c for c in Comparator}
_LOOKUPS.update(
    {
        "prefix": Comparator.PREFIX,
        "startswith": Comparator.PREFIX,
        "in_range": Comparator.RANGE,
    }
)


def encode_key(field: str, comparator: Comparator = Comparator.EQUALS) -> str:
    """Encode a field + comparator pair into a query group key."""
    comparator = Comparator(comparator)
    if comparator.suffix is None:
        return field
    return f"{field}?{comparator.suffix}"


def parse_lookup(key: str) -> Tuple[str, Comparator]:
    """Split a `field__lookup` keyword into a dotted field path and comparator.

    Unknown or missing lookups mean equality on the whole key, so
    `profile__age__gte` is `("profile.age", GTE)` and `profile__age` is
    `("profile.age", EQUALS)`. Only `__` between two other characters
    separates segments; leading and trailing underscores belong to the
    field, so `__expires__lt` is `("__expires", LESS_THAN)`.
    """
    parts = _SEPARATOR.split(key)
    if len(parts) > 1:
        comparator = _LOOKUPS.get(parts[-1])
        if comparator is not None:
            return ".".join(parts[:-1]), comparator
    return ".".join(parts), Comparator.EQUALS


@dataclass(frozen=True)
class Filter:
    """One predicate inside a query group."""

    field: str
    comparator: Comparator
    value: Any

    @property
    def key(self) -> str:
        return encode_key(self.field, self.comparator)

    def wire_value(self) -> Any:
        """Value as sent on the wire; range bound tuples become lists."""
        if self.comparator is Comparator.RANGE and isinstance(self.value, tuple):
            return list(self.value)
        return self.value
