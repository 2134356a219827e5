"""Client for a Base (hosted document store).

Key Features:
    - Single-record get / insert / delete
    - Bulk upsert with the 25-item limit checked before sending
    - Partial updates through `Updater`
    - Queries through `Query`, one page at a time or walked to the end
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from .constants import MAX_PUT_ITEMS
from .exceptions import PayloadError
from .https import HttpClient
from .logger import Logger
from .querydsl.query import Query, WalkErrorPolicy
from .schema import QueryResult, Record, parse_model
from .types import Item
from .updater import Updater
from .utils import chunk_iter, quote_name, validate_key


class Base:
    """A named Base inside a project.

    Attributes:
        name: Base name
        http: HTTP client rooted at `<database host>/<project_id>/<name>`
    """

    def __init__(self, name: str, http: HttpClient) -> None:
        self.name = validate_key(name, field="name")
        self.http = http
        self.logger = Logger(self.__class__.__name__)

    def __repr__(self) -> str:
        return f"<Base {self.name!r}>"

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "Base":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def get(self, key: str) -> Dict[str, Any]:
        """Fetch one record.

        Raises:
            NotFound: If no record has this key
        """
        key = validate_key(key)
        return self.http.request_json("GET", f"/items/{quote_name(key)}")

    def put(self, items: Union[Item, List[Item]]) -> Dict[str, Any]:
        """Upsert up to 25 records in one request.

        Args:
            items: A Record, a dict, a bare value, or a list of them

        Returns:
            Response body with `processed` and (optionally) `failed` items

        Raises:
            PayloadError: If more than 25 records are given (nothing is sent)
        """
        records = _as_records(items)
        if len(records) > MAX_PUT_ITEMS:
            raise PayloadError(
                f"put accepts at most {MAX_PUT_ITEMS} items; use put_many",
                count=len(records),
                max_items=MAX_PUT_ITEMS,
            )
        if not records:
            raise PayloadError("put requires at least one item")
        payload = {"items": [record.to_payload() for record in records]}
        result = self.http.request_json("PUT", "/items", json=payload)
        self.logger.message("Put %d item(s) into base '%s'.", len(records), self.name)
        return result

    def put_many(self, items: Iterable[Item]) -> Dict[str, Any]:
        """Upsert any number of records in batches of 25.

        Returns:
            Merged response: `{"processed": {"items": [...]}, "failed": {"items": [...]}}`
        """
        records = _as_records(list(items))
        processed: List[Dict[str, Any]] = []
        failed: List[Dict[str, Any]] = []
        for batch in chunk_iter(records, MAX_PUT_ITEMS):
            result = self.put(list(batch))
            processed.extend((result.get("processed") or {}).get("items", []))
            failed.extend((result.get("failed") or {}).get("items", []))
        merged: Dict[str, Any] = {"processed": {"items": processed}}
        if failed:
            merged["failed"] = {"items": failed}
        return merged

    def insert(self, item: Item, key: Optional[str] = None, **kwargs: Any) -> Dict[str, Any]:
        """Create a record, failing if the key already exists.

        Args:
            item: Record, dict or bare value
            key: Optional key overriding any key inside `item`
            **kwargs: `expires_in` / `expires_at`

        Raises:
            Conflict: If a record with the same key exists
        """
        if key is not None:
            kwargs["key"] = validate_key(key)
        record = Record.from_any(item, **kwargs)
        result = self.http.request_json("POST", "/items", json={"item": record.to_payload()})
        self.logger.message("Inserted item '%s' into base '%s'.", result.get("key"), self.name)
        return result

    def delete(self, key: str) -> Dict[str, Any]:
        """Delete one record; deleting a missing key is not an error server-side."""
        key = validate_key(key)
        return self.http.request_json("DELETE", f"/items/{quote_name(key)}")

    def updater(self, key: str) -> Updater:
        """Return an Updater bound to this Base."""
        return Updater(key, base=self)

    def update(self, updater: Updater) -> Dict[str, Any]:
        """Apply an Updater's operations to its record.

        Raises:
            PayloadError: If the updater carries no operations
            NotFound: If the record does not exist
        """
        payload = updater.to_dict()
        if not payload:
            raise PayloadError("update requires at least one operation", key=updater.key)
        result = self.http.request_json("PATCH", f"/items/{quote_name(updater.key)}", json=payload)
        self.logger.message("Updated item '%s' in base '%s'.", updater.key, self.name)
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(self, **lookups: Any) -> Query:
        """Return a new Query bound to this Base."""
        return Query(self, **lookups)

    def fetch(self, query: Optional[Query] = None) -> QueryResult:
        """Run one page of `query` (an empty query matches everything)."""
        if query is None:
            query = Query()
        body = self.http.request_json("POST", "/query", json=query.to_dict())
        result = parse_model(QueryResult, body, base=self.name)
        self.logger.message("Query on base '%s' returned %d item(s).", self.name, result.count)
        return result

    def fetch_all(
        self,
        query: Optional[Query] = None,
        on_error: Union[WalkErrorPolicy, str] = WalkErrorPolicy.RAISE,
    ) -> QueryResult:
        """Walk every page of `query` against this Base and return all items."""
        query = query.copy() if query is not None else Query()
        return query.bind(self).walk(on_error=on_error)


def _as_records(items: Union[Item, List[Item]]) -> List[Record]:
    if isinstance(items, list):
        return [Record.from_any(item) for item in items]
    return [Record.from_any(items)]
