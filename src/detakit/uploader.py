"""Chunked blob upload for Drive.

Blobs up to `MAX_CHUNK_SIZE` bytes go up in a single request. Larger blobs
use a three-phase session protocol:

1. initiate  `POST /uploads?name=<name>`                     -> upload_id
2. parts     `POST /uploads/<id>/parts?name=<name>&part=<n>`  (n from 1)
3. commit    `PATCH /uploads/<id>?name=<name>`   when every part succeeded
   abort     `DELETE /uploads/<id>?name=<name>`  otherwise

Exactly one of commit/abort is sent for every session that was initiated.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Tuple
from urllib.parse import unquote

from .constants import MAX_CHUNK_SIZE
from .exceptions import DetaError, PayloadError, SerializationError, UploadAbortedError
from .https import HttpClient
from .logger import Logger
from .schema import UploadSession, parse_model
from .types import Content
from .utils import chunk_iter, quote_name, validate_key


class ChunkUploader:
    """Uploads one blob per `upload()` call, chunking when it is large.

    Attributes:
        chunk_size: Size threshold and part size in bytes
        max_workers: Parts uploaded concurrently (1 means sequential)
    """

    def __init__(self, http: HttpClient, chunk_size: int = MAX_CHUNK_SIZE, max_workers: int = 1) -> None:
        if chunk_size <= 0:
            raise PayloadError("chunk_size must be positive", chunk_size=chunk_size)
        if max_workers < 1:
            raise PayloadError("max_workers must be at least 1", max_workers=max_workers)
        self.http = http
        self.chunk_size = chunk_size
        self.max_workers = max_workers
        self.logger = Logger(self.__class__.__name__)

    def upload(self, save_as: str, content: Content) -> Dict[str, Any]:
        """Upload `content` under `save_as` and return the service response.

        Raises:
            PayloadError: If `save_as` is empty
            UploadAbortedError: If a part failed and the session was aborted; the
                abort response is attached as `.response`
        """
        name = quote_name(validate_key(save_as, field="save_as"))
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        if len(data) <= self.chunk_size:
            return self.http.request_json("POST", f"/files?name={name}", content=data)
        return self._upload_chunked(name, data)

    # ------------------------------------------------------------------
    # Session phases
    # ------------------------------------------------------------------

    def initiate(self, name: str) -> UploadSession:
        """Open an upload session; `name` must already be percent-encoded."""
        body = self.http.request_json("POST", f"/uploads?name={name}")
        if not isinstance(body, dict):
            raise SerializationError("Unexpected initiate response", phase="initiate", body=body)
        session = parse_model(
            UploadSession,
            {"upload_id": body.get("upload_id"), "target_name": body.get("name") or unquote(name)},
            phase="initiate",
        )
        self.logger.message("Upload session %s opened for '%s'.", session.upload_id, session.target_name)
        return session

    def upload_part(self, session: UploadSession, name: str, part: int, chunk: bytes) -> bool:
        """Send one part; failures are logged and reported as False."""
        path = f"/uploads/{quote_name(session.upload_id)}/parts?name={name}&part={part}"
        try:
            self.http.request("POST", path, content=chunk)
        except DetaError as e:
            self.logger.warning("Part %d of upload %s failed: %s", part, session.upload_id, e)
            return False
        return True

    def commit(self, session: UploadSession, name: str) -> Dict[str, Any]:
        result = self.http.request_json("PATCH", f"/uploads/{quote_name(session.upload_id)}?name={name}")
        self.logger.message(
            "Upload session %s committed (%d parts).", session.upload_id, len(session.parts_uploaded)
        )
        return result

    def abort(self, session: UploadSession, name: str) -> Dict[str, Any]:
        result = self.http.request_json("DELETE", f"/uploads/{quote_name(session.upload_id)}?name={name}")
        self.logger.warning("Upload session %s aborted (failed parts: %s).", session.upload_id, session.failed_parts)
        return result

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def _upload_parts(self, session: UploadSession, name: str, data: bytes) -> None:
        parts: List[Tuple[int, bytes]] = list(enumerate(chunk_iter(data, self.chunk_size), start=1))
        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(lambda p: self.upload_part(session, name, p[0], p[1]), parts))
        else:
            results = [self.upload_part(session, name, number, chunk) for number, chunk in parts]
        for (number, _), ok in zip(parts, results):
            if ok:
                session.parts_uploaded.append(number)
            else:
                session.failed_parts.append(number)

    def _upload_chunked(self, name: str, data: bytes) -> Dict[str, Any]:
        session = self.initiate(name)
        try:
            self._upload_parts(session, name, data)
        except Exception:
            self.abort(session, name)
            raise

        if session.all_succeeded:
            return self.commit(session, name)

        response = self.abort(session, name)
        raise UploadAbortedError(
            "Chunked upload aborted",
            response=response,
            upload_id=session.upload_id,
            failed_parts=list(session.failed_parts),
        )
