"""Client for a Drive (hosted blob store)."""

from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from .constants import DEFAULT_LIST_LIMIT, MAX_CHUNK_SIZE, MAX_DELETE_NAMES
from .exceptions import PayloadError
from .https import HttpClient
from .logger import Logger
from .schema import FileList, parse_model
from .types import Content, Names
from .uploader import ChunkUploader
from .utils import normalize_names, quote_name, validate_key


class Drive:
    """A named Drive inside a project.

    Attributes:
        name: Drive name
        http: HTTP client rooted at `<drive host>/<project_id>/<name>`
        uploader: Chunked upload coordinator used by `put`
    """

    def __init__(
        self,
        name: str,
        http: HttpClient,
        chunk_size: int = MAX_CHUNK_SIZE,
        max_workers: int = 1,
    ) -> None:
        self.name = validate_key(name, field="name")
        self.http = http
        self.uploader = ChunkUploader(http, chunk_size=chunk_size, max_workers=max_workers)
        self.logger = Logger(self.__class__.__name__)

    def __repr__(self) -> str:
        return f"<Drive {self.name!r}>"

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "Drive":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def list(
        self,
        prefix: Optional[str] = None,
        limit: Optional[int] = None,
        last: Optional[str] = None,
    ) -> FileList:
        """List one page of file names."""
        params: Dict[str, Any] = {"limit": limit if limit is not None else DEFAULT_LIST_LIMIT}
        if prefix:
            params["prefix"] = prefix
        if last:
            params["last"] = last
        body = self.http.request_json("GET", "/files", params=params)
        return parse_model(FileList, body, drive=self.name)

    def list_all(self, prefix: Optional[str] = None, limit: Optional[int] = None) -> Iterator[str]:
        """Yield every file name, following the `paging.last` cursor."""
        last: Optional[str] = None
        while True:
            page = self.list(prefix=prefix, limit=limit, last=last)
            yield from page.names
            if not page.last:
                return
            last = page.last

    def get(self, name: str) -> bytes:
        """Download a file's content.

        Raises:
            NotFound: If the file does not exist
        """
        name = validate_key(name, field="name")
        return self.http.request_bytes("GET", f"/files/download?name={quote_name(name)}")

    def put(
        self,
        save_as: str,
        content: Optional[Content] = None,
        *,
        path: Union[str, Path, None] = None,
    ) -> Dict[str, Any]:
        """Upload `content` (or the file at `path`) as `save_as`.

        Content larger than the chunk size is sent as a chunked upload that is
        either committed whole or aborted.

        Raises:
            PayloadError: If neither or both of `content` and `path` are given
            UploadAbortedError: If a chunk failed and the upload was aborted. The
                abort response is available only on the exception, as `.response`
        """
        if (content is None) == (path is None):
            raise PayloadError("Provide exactly one of content or path", save_as=save_as)
        if path is not None:
            content = Path(path).read_bytes()
        result = self.uploader.upload(save_as, content)
        self.logger.message("Stored '%s' in drive '%s'.", save_as, self.name)
        return result

    def delete(self, names: Names) -> Dict[str, Any]:
        """Delete up to 1000 files.

        Returns:
            Response body with `deleted` names and `failed` reasons

        Raises:
            PayloadError: If more than 1000 names are given (nothing is sent)
        """
        names = normalize_names(names)
        if not names:
            raise PayloadError("delete requires at least one name")
        if len(names) > MAX_DELETE_NAMES:
            raise PayloadError(
                f"delete accepts at most {MAX_DELETE_NAMES} names",
                count=len(names),
                max_names=MAX_DELETE_NAMES,
            )
        result = self.http.request_json("DELETE", "/files", json={"names": names})
        self.logger.message("Deleted %d file(s) from drive '%s'.", len(names), self.name)
        return result
