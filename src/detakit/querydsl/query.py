"""Query builder and pagination walker.

A `Query` accumulates predicates into a *current* group (an AND of
`field[?op]: value` entries) and keeps a list of finished groups that are
OR-ed with it. The wire payload is always a list of groups, with the
current group last:

    {"limit": 1000, "last": "...", "sort": "desc", "query": [{...}, {...}]}

Typical usage:

- Build: `base.query().equals("status", "active").greater_than("age", 18)`
- OR: `q1.union(q2)` or `q1 | q2`
- Kwargs: `Query(profile__age__gte=18, name__pfx="Jo")`
- Execute: `q.run()` for one page, `q.walk()` for every page
"""

from __future__ import annotations

from copy import deepcopy
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Union

from ..constants import DEFAULT_QUERY_LIMIT
from ..exceptions import DetaError, PayloadError, UnboundBuilderError
from ..logger import get_logger
from ..schema import Paging, QueryResult
from .filters import Comparator, Filter, parse_lookup

if TYPE_CHECKING:
    from ..base import Base

__all__ = ("Query", "WalkErrorPolicy")

logger = get_logger("query")

QueryGroup = Dict[str, Any]


class WalkErrorPolicy(str, Enum):
    """What a walk does when a page after the first one fails."""

    RAISE = "raise"
    PARTIAL = "partial"


class Query:
    """Fluent predicate accumulator bound (optionally) to a Base.

    Every builder method mutates the query and returns it, so calls chain.
    Pagination never mutates the query it was started from: follow-up pages
    run on copies.
    """

    def __init__(self, base: Optional["Base"] = None, /, **lookups: Any) -> None:
        self._base = base
        self._groups: List[QueryGroup] = []
        self._current: QueryGroup = {}
        self._limit: Optional[int] = None
        self._last: Optional[str] = None
        self._sort: bool = False
        if lookups:
            self.filter(**lookups)

    def __repr__(self) -> str:
        return f"<Query: {self.to_dict()}>"

    def __str__(self) -> str:
        return str(self.to_dict())

    def __or__(self, other: "Query") -> "Query":
        """Return a new query OR-ing both queries' groups."""
        return self.copy().union(other)

    # -------------------
    # Predicates
    # -------------------
    def set(self, comparator: Union[Comparator, str], field: str, value: Any) -> "Query":
        """Insert or overwrite a predicate in the current group."""
        predicate = Filter(field=field, comparator=Comparator(comparator), value=value)
        self._current[predicate.key] = predicate.wire_value()
        return self

    def equals(self, field: str, value: Any) -> "Query":
        return self.set(Comparator.EQUALS, field, value)

    def not_equals(self, field: str, value: Any) -> "Query":
        return self.set(Comparator.NOT_EQUALS, field, value)

    def greater_than(self, field: str, value: Any) -> "Query":
        return self.set(Comparator.GREATER_THAN, field, value)

    def greater_than_or_equals(self, field: str, value: Any) -> "Query":
        return self.set(Comparator.GREATER_THAN_OR_EQUALS, field, value)

    def less_than(self, field: str, value: Any) -> "Query":
        return self.set(Comparator.LESS_THAN, field, value)

    def less_than_or_equals(self, field: str, value: Any) -> "Query":
        return self.set(Comparator.LESS_THAN_OR_EQUALS, field, value)

    def in_range(self, field: str, start: Any, end: Any) -> "Query":
        """Inclusive range check, sent as `field?range: [start, end]`."""
        return self.set(Comparator.RANGE, field, (start, end))

    def contains(self, field: str, value: Any) -> "Query":
        return self.set(Comparator.CONTAINS, field, value)

    def not_contains(self, field: str, value: Any) -> "Query":
        return self.set(Comparator.NOT_CONTAINS, field, value)

    def prefix(self, field: str, value: str) -> "Query":
        return self.set(Comparator.PREFIX, field, value)

    def filter(self, **lookups: Any) -> "Query":
        """Add `field__lookup=value` predicates to the current group.

        Nested fields use `__` as separator (`profile__age__gte=18` becomes
        `profile.age?gte`). A keyword without a known lookup is an equality.
        """
        for key, value in lookups.items():
            field, comparator = parse_lookup(key)
            self.set(comparator, field, value)
        return self

    # -------------------
    # OR groups
    # -------------------
    def append(self, group: Union[QueryGroup, "Query"]) -> "Query":
        """Add a hand-built group (or another query) as an extra OR branch."""
        if isinstance(group, Query):
            return self.union(group)
        if not isinstance(group, dict):
            raise TypeError(f"group must be a dict or Query, got {type(group).__name__}")
        self._groups.append(deepcopy(group))
        return self

    def union(self, other: "Query") -> "Query":
        """Fold `other`'s groups, then its current group, in as OR branches.

        `self`'s current group stays the trailing group; `other` is not modified.
        """
        self._groups.extend(deepcopy(group) for group in other._groups)
        self._groups.append(deepcopy(other._current))
        return self

    # -------------------
    # Options
    # -------------------
    def limit(self, limit: int) -> "Query":
        """Page size; unset means the service default of 1000."""
        self._limit = limit
        return self

    def last(self, last: Optional[str]) -> "Query":
        """Cursor to resume from (`paging.last` of a previous page)."""
        self._last = last
        return self

    def sort(self, desc: bool = True) -> "Query":
        """Sort by key in descending order when `desc` is True."""
        self._sort = desc
        return self

    def bind(self, base: "Base") -> "Query":
        """Attach the Base that `run()` and `walk()` send requests to."""
        self._base = base
        return self

    def copy(self) -> "Query":
        """Independent copy sharing the bound Base."""
        clone = Query(self._base)
        clone._groups = deepcopy(self._groups)
        clone._current = deepcopy(self._current)
        clone._limit = self._limit
        clone._last = self._last
        clone._sort = self._sort
        return clone

    @property
    def base(self) -> Optional["Base"]:
        return self._base

    @property
    def groups(self) -> List[QueryGroup]:
        """All groups in wire order, the current group last."""
        return [dict(group) for group in self._groups] + [dict(self._current)]

    @property
    def group_count(self) -> int:
        return len(self._groups) + 1

    # -------------------
    # Serialization
    # -------------------
    def to_dict(self) -> Dict[str, Any]:
        """Return the wire payload for `POST /query`."""
        payload: Dict[str, Any] = {"limit": self._limit if self._limit is not None else DEFAULT_QUERY_LIMIT}
        if self._last:
            payload["last"] = self._last
        if self._sort is True:
            payload["sort"] = "desc"
        payload["query"] = self.groups
        return payload

    # -------------------
    # Execution
    # -------------------
    def run(self) -> QueryResult:
        """Fetch a single page.

        Raises:
            UnboundBuilderError: If the query is not bound to a Base
        """
        if self._base is None:
            raise UnboundBuilderError("Query is not bound to a Base", hint="use base.query() or base.fetch(query)")
        return self._base.fetch(self)

    def iter_pages(self, on_error: Union[WalkErrorPolicy, str] = WalkErrorPolicy.RAISE) -> Iterator[QueryResult]:
        """Yield pages until `paging.last` comes back empty.

        The first request runs this query as-is; each follow-up page runs on a
        copy with `last` set to the previous cursor. An error on the first page
        always propagates. On later pages `on_error="raise"` propagates it and
        `on_error="partial"` ends the iteration. Stop consuming the iterator
        to stop early.
        """
        policy = WalkErrorPolicy(on_error)
        page = self.run()
        pages = 1
        yield page
        while page.paging.last:
            cursor = page.paging.last
            try:
                page = self.copy().last(cursor).run()
            except DetaError as e:
                if policy is WalkErrorPolicy.RAISE:
                    raise
                logger.warning("Query walk stopped after %d page(s) at cursor %r: %s", pages, cursor, e)
                return
            pages += 1
            yield page

    def walk(self, on_error: Union[WalkErrorPolicy, str] = WalkErrorPolicy.RAISE) -> QueryResult:
        """Fetch every page and return all items as one result.

        Raises:
            PayloadError: If an explicit limit is set (before any request)
        """
        if self._limit is not None:
            raise PayloadError("limit must be unset for full-walk mode", limit=self._limit)
        items: List[Dict[str, Any]] = []
        for page in self.iter_pages(on_error=on_error):
            items.extend(page.items)
        return QueryResult(paging=Paging(size=len(items), last=""), items=items)
