"""
Entry point tying a project key to its Bases and Drives.

This module provides `Deta`, which validates the project key once and hands
out `Base` and `Drive` clients sharing the same credentials, hosts, timeout
and (optionally) an injected `httpx` transport.
"""

from typing import Any, List, Optional, Union

import httpx

from .base import Base
from .constants import DEFAULT_BASE_HOST, DEFAULT_DRIVE_HOST, DEFAULT_TIMEOUT, MAX_CHUNK_SIZE
from .drive import Drive
from .exceptions import MissingConfigError
from .https import HttpClient
from .logger import Logger, setup_global_logging
from .settings import DetaSettings
from .utils import split_project_key, validate_key


class Deta:
    """Project-level client factory.

    Example:
        >>> deta = Deta("a0abcyxz_secret")
        >>> users = deta.base("users")
        >>> photos = deta.drive("photos")

    Attributes:
        project_id: Part of the project key before the underscore
    """

    def __init__(
        self,
        project_key: str,
        *,
        base_host: str = DEFAULT_BASE_HOST,
        drive_host: str = DEFAULT_DRIVE_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Create a client from explicit configuration.

        Args:
            project_key: `<project_id>_<secret>` key sent as `X-API-Key`
            base_host: Root URL of the document store API
            drive_host: Root URL of the blob store API
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (e.g. `httpx.MockTransport` in tests)

        Raises:
            InvalidProjectKeyError: If the key is not `<project_id>_<secret>`
        """
        self.project_id, _ = split_project_key(project_key)
        self._project_key = project_key
        self.base_host = base_host.rstrip("/")
        self.drive_host = drive_host.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._clients: List[Union[Base, Drive]] = []
        self.logger = Logger(self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings: Optional[DetaSettings] = None, **kwargs: Any) -> "Deta":
        """Build a client from `DetaSettings` (environment / `.env`).

        This is the only place the environment is read. `LOG_LEVEL` is applied
        to the `detakit` logger.

        Raises:
            MissingConfigError: If DETA_PROJECT_KEY is not configured
        """
        settings = settings or DetaSettings()
        if not settings.DETA_PROJECT_KEY:
            raise MissingConfigError("Project key not configured", config_key="DETA_PROJECT_KEY", env_file=".env")
        setup_global_logging(settings.LOG_LEVEL)
        kwargs.setdefault("base_host", settings.DETA_BASE_HOST)
        kwargs.setdefault("drive_host", settings.DETA_DRIVE_HOST)
        kwargs.setdefault("timeout", settings.DETA_TIMEOUT)
        return cls(settings.DETA_PROJECT_KEY, **kwargs)

    def __repr__(self) -> str:
        return f"<Deta project={self.project_id!r}>"

    def _http(self, host: str, name: str) -> HttpClient:
        return HttpClient(
            f"{host}/{self.project_id}/{name}",
            api_key=self._project_key,
            timeout=self.timeout,
            transport=self._transport,
        )

    def base(self, name: str) -> Base:
        """Return a client for the Base called `name`."""
        name = validate_key(name, field="name")
        base = Base(name, self._http(self.base_host, name))
        self._clients.append(base)
        self.logger.message("Base client created: %s", name)
        return base

    def drive(self, name: str, chunk_size: int = MAX_CHUNK_SIZE, max_workers: int = 1) -> Drive:
        """Return a client for the Drive called `name`."""
        name = validate_key(name, field="name")
        drive = Drive(name, self._http(self.drive_host, name), chunk_size=chunk_size, max_workers=max_workers)
        self._clients.append(drive)
        self.logger.message("Drive client created: %s", name)
        return drive

    def close(self) -> None:
        """Close every Base and Drive client handed out so far."""
        while self._clients:
            self._clients.pop().close()

    def __enter__(self) -> "Deta":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
