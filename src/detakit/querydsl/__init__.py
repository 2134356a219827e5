"""Query DSL module.

Exports the `Query` builder used to compose Base queries, plus the
`Comparator` and `Filter` types describing individual predicates.
"""

from .filters import Comparator, Filter
from .query import Query, WalkErrorPolicy

__all__ = ("Query", "Comparator", "Filter", "WalkErrorPolicy")
