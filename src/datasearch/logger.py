import logging
from typing import Any, Optional

from datasearch.settings import settings as api_settings

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_configured = False


def setup_global_logging(level: str = "INFO") -> None:
    """Configure the root logger once in a standardized format.

    Args:
        level: Log level name (e.g., "DEBUG", "INFO")
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=_LEVELS.get(level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _configured = True


def get_logger(name: Optional[str] = None) -> "Logger":
    """Return a logger for a compiler module, configuring logging on first use."""
    return Logger(name or __name__)


class Logger:
    """Logger for compilation events.

    - `compiled` / `skipped` record what a compiler did with one criterion,
      tagged with the compiler class. Predicates are rendered through the
      compiler's `to_expr` only when DEBUG is enabled.
    - `message` logs at the configured LOG_LEVEL (INFO when unset).
    """

    def __init__(self, name: Optional[str] = None) -> None:
        if not _configured:
            setup_global_logging(api_settings.LOG_LEVEL)
        self._logger = logging.getLogger(name or __name__)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def compiled(self, compiler: Any, criteria: Any, predicate: Any) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self.debug(
                "[%s] Compiled criterion %s -> %s",
                type(compiler).__name__,
                criteria,
                compiler.to_expr(predicate),
            )

    def skipped(self, compiler: Any, criteria: Any) -> None:
        self.debug("[%s] Skipping criterion with unknown operator: %s", type(compiler).__name__, criteria)

    def message(self, msg: str, *args, **kwargs) -> None:
        level = (api_settings.LOG_LEVEL or "").upper()
        self._logger.log(_LEVELS.get(level, logging.INFO), msg, *args, **kwargs)
