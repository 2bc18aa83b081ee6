"""loguru integration for id3tree.

The package logs through the shared loguru ``logger`` but stays silent until
``enable_logging()`` is called. Tree construction reports at three levels:

* ``INFO``: one record when a build starts and one when it finishes.
* ``SPLIT``: a custom level (15) with one record per internal node.
* ``DEBUG``: the score of every candidate feature and every leaf created.

Note:
    On import, loguru's stock stderr sink (handler 0) is removed so that
    records are not printed twice once ``enable_logging()`` installs its own
    sink. Applications that replaced handler 0 before importing id3tree are
    unaffected.
"""

from __future__ import annotations

import contextlib
import sys
import threading
import warnings
from typing import TYPE_CHECKING, ClassVar, Final, Literal

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

SPLIT_LEVEL: Final[str] = "SPLIT"
SPLIT_LEVEL_NUMBER: Final[int] = 15

type LogLevel = Literal["TRACE", "DEBUG", "SPLIT", "INFO", "WARNING", "ERROR", "CRITICAL"]
type LogFormat = Literal["short", "full"]

_TIME_AND_LEVEL: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "  # noqa: RUF027 - loguru format string
)
_MESSAGE_AND_EXTRA: Final[str] = "<level>{message}</level> | {extra}"
_FORMATS: Final[dict[str, str]] = {
    "short": _TIME_AND_LEVEL + "<cyan>{function}</cyan> - " + _MESSAGE_AND_EXTRA,
    "full": _TIME_AND_LEVEL + "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - " + _MESSAGE_AND_EXTRA,
}


def _register_split_level() -> None:
    """Add the SPLIT level to loguru, or check an existing registration.

    loguru cannot renumber a level, so a SPLIT level that is already present
    with a different number is reported with a UserWarning and left as is.
    """
    try:
        registered = logger.level(SPLIT_LEVEL)
    except ValueError:
        logger.level(SPLIT_LEVEL, no=SPLIT_LEVEL_NUMBER, icon="🌳")
        return
    if registered.no != SPLIT_LEVEL_NUMBER:
        warnings.warn(
            f"SPLIT level already registered with numeric value {registered.no}, expected {SPLIT_LEVEL_NUMBER}",
            stacklevel=2,
        )


_register_split_level()


class LoggingHandle:
    """Owns one stderr sink installed by `enable_logging`.

    Handles are tracked at class level. Package logging is switched off again
    when the last live handle is disabled.

    Examples:
        >>> with enable_logging(level="SPLIT"):  # doctest: +SKIP
        ...     build_decision_tree(records)

        >>> handle = enable_logging()  # doctest: +SKIP
        >>> handle.disable()  # doctest: +SKIP
    """

    _active_ids: ClassVar[set[int]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int) -> None:
        """Register a freshly added loguru sink.

        Args:
            handler_id (int): ID returned by ``logger.add()``.
        """
        self.handler_id: int | None = handler_id
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    @property
    def is_active(self) -> bool:
        """bool: Whether the sink is still installed."""
        return self.handler_id is not None

    def disable(self) -> None:
        """Remove the sink. Calling this again has no effect."""
        with LoggingHandle._lock:
            if self.handler_id is not None:
                self._release(self.handler_id)
                self.handler_id = None

    @classmethod
    def _release(cls, handler_id: int) -> None:
        """Forget a handler and remove its sink; the caller holds `_lock`.

        Args:
            handler_id (int): ID of the sink to remove.
        """
        cls._active_ids.discard(handler_id)
        with contextlib.suppress(ValueError):
            logger.remove(handler_id)
        if not cls._active_ids:
            logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        """Use the handle as a context manager.

        Returns:
            LoggingHandle: This handle.
        """
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Disable the handle when the block ends, whether or not it raised.

        Args:
            exc_type (type[BaseException] | None): Exception type, if any.
            exc_val (BaseException | None): Exception instance, if any.
            exc_tb (TracebackType | None): Traceback, if any.
        """
        self.disable()

    def __repr__(self) -> str:
        """Return a representation showing the owned handler ID.

        Returns:
            str: `"LoggingHandle(handler_id=...)"`; the ID is `None` once disabled.
        """
        return f"LoggingHandle(handler_id={self.handler_id!r})"

    @classmethod
    def get_active_handle_count(cls) -> int:
        """Count the handles that have not been disabled yet.

        Returns:
            int: Number of live handles.
        """
        with cls._lock:
            return len(cls._active_ids)


def enable_logging(
    *,
    level: LogLevel = "INFO",
    log_format: LogFormat = "short",
) -> LoggingHandle:
    """Print id3tree log records to stderr.

    Every call installs its own sink and returns the handle that owns it.

    Args:
        level (LogLevel): Lowest level printed. "INFO" (default) gives one
            line per build, "SPLIT" adds every split decision and "DEBUG"
            adds candidate scores and leaf creation.
        log_format (LogFormat): "short" (default) names the emitting
            function; "full" adds the module and line number.

    Returns:
        LoggingHandle: Owner of the new sink; disable it or use it as a
            context manager.

    Note:
        Disabling the last live handle calls ``logger.disable("id3tree")``.
        Applications routing id3tree records to their own sinks should call
        ``logger.enable("id3tree")`` afterwards.
    """
    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(
        sys.stderr,
        level=level,
        format=_FORMATS[log_format],
        filter=_is_id3tree_record,
    )
    return LoggingHandle(handler_id)


def _is_id3tree_record(record: Record) -> bool:
    """Keep only records emitted from inside the package.

    Args:
        record (Record): Record offered to the sink.

    Returns:
        bool: True for records logged by an ``id3tree`` module.
    """
    module = record["name"]
    return module is not None and module.startswith(PACKAGE_NAME)
