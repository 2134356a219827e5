"""HTTP plumbing shared by Base and Drive.

`HttpClient` owns one `httpx.Client` rooted at a resource URL
(`<host>/<project_id>/<name>`), injects the API key header on every call and
turns transport failures and non-2xx responses into detakit exceptions.
"""

from typing import Any, Dict, Optional

import httpx

from .constants import API_KEY_HEADER, DEFAULT_TIMEOUT, ContentType
from .exceptions import SerializationError, TransportError, error_for_status
from .logger import Logger


class HttpClient:
    """Blocking JSON/binary client for one Base or Drive.

    Attributes:
        base_url: Resource root every relative path is joined to
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={API_KEY_HEADER: api_key},
            timeout=timeout,
            transport=transport,
        )
        self.logger = Logger(self.__class__.__name__)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        content: Optional[bytes] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send one request and return the response if it is 2xx.

        `path` may already carry a percent-encoded query string; it is sent
        as-is. `content` is sent as an octet-stream body, `json` as a JSON body.

        Raises:
            TransportError: If no response was received
            HTTPError: (or a status subclass) for any non-2xx response
        """
        headers = {"Content-Type": ContentType.OCTET_STREAM if content is not None else ContentType.JSON}
        self.logger.message("%s %s%s", method, self.base_url, path)
        try:
            response = self._client.request(method, path, json=json, content=content, params=params, headers=headers)
        except httpx.TransportError as e:
            raise TransportError(str(e) or e.__class__.__name__, method=method, path=path) from e

        if response.is_success:
            return response

        raise error_for_status(
            response.status_code,
            _error_message(response),
            method=method,
            path=path,
        )

    def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and decode the JSON body; empty bodies decode to `{}`."""
        response = self.request(method, path, **kwargs)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise SerializationError("Response is not valid JSON", method=method, path=path) from e

    def request_bytes(self, method: str, path: str, **kwargs: Any) -> bytes:
        return self.request(method, path, **kwargs).content


def _error_message(response: httpx.Response) -> str:
    """Best-effort message from an error response (`{"errors": [...]}` or reason phrase)."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("errors"):
        return "; ".join(str(e) for e in data["errors"])
    return response.reason_phrase or ""
