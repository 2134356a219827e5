import logging
from typing import Optional

ROOT_LOGGER_NAME = "detakit"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_configured = False


def setup_global_logging(level: str = "INFO") -> None:
    """Set the `detakit` logger level and attach a stream handler once.

    Only the package logger is touched, so applications embedding the client
    keep control of the root logger.

    Args:
        level: Log level name (e.g., "DEBUG", "INFO")
    """
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_LEVELS.get(level.upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        root.addHandler(handler)
    _configured = True


def get_logger(name: Optional[str] = None) -> "Logger":
    """Return a logger under the `detakit` namespace.

    Args:
        name: Child logger name, usually the class or module name
    """
    return Logger(name)


class Logger:
    """Thin wrapper over standard logging scoped to the `detakit` namespace.

    `.message(text)` is the request-trace channel, so per-request chatter
    stays quiet under the default INFO level.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        if not _configured:
            setup_global_logging()
        if name and not name.startswith(ROOT_LOGGER_NAME):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self._logger = logging.getLogger(name or ROOT_LOGGER_NAME)

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(msg, *args, **kwargs)

    def message(self, msg: str, *args, **kwargs) -> None:
        # Request traces never go above DEBUG
        self._logger.debug(msg, *args, **kwargs)
