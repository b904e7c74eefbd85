"""
Configures loggers with stdout / stderr stream handlers and an optional log file.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from logging import LogRecord, Logger, Filter, Formatter
from pathlib import Path
from typing import Optional, Union, Collection, Callable

from tzlocal import get_localzone

__all__ = [
    'init_logging', 'create_filter', 'prep_log_dir', 'DatetimeFormatter', 'ENTRY_FMT_DETAILED',
    'ENTRY_FMT_DETAILED_UID',
]
log = logging.getLogger(__name__)

ENTRY_FMT_DETAILED = '%(asctime)s %(levelname)s %(threadName)s %(name)s %(lineno)d %(message)s'
ENTRY_FMT_DETAILED_UID = '%(asctime)s %(levelname)s %(threadName)s %(name)s %(lineno)d [%(uid)s] %(message)s'

_NotSet = object()

PathLike = Union[Path, str]
Verbosity = Union[int, bool, None]
OptStrs = Optional[Collection[str]]


def init_logging(
    verbosity: Verbosity = 0,
    *,
    log_path: PathLike | None = None,
    names: OptStrs = _NotSet,
    date_fmt: str = None,
    entry_fmt: str = None,
    file_fmt: str = None,
    file_lvl: int = logging.DEBUG,
    streams: bool = True,
    replace_handlers: bool = True,
    capture_warnings: bool = True,
) -> Optional[Path]:
    """
    Configures stream handlers for stdout and stderr so that logs with level logging.INFO and below are sent to stdout
    and logs with level logging.WARNING and above are sent to stderr.  If a log_path is provided, then a file handler
    will be added as well.

    The verbosity argument affects the log level that is set for stdout:
    - 0: 20 = logging.INFO (default)
    - 1: 19 = custom 'verbose' log level
    - 2: 10 = logging.DEBUG
    - 3: 9

    :param verbosity: Higher values increase stdout output verbosity.
    :param log_path: The path where logs should be written, or None (default) to prevent logging to file.
    :param names: The names of the loggers for which handlers should be configured.  If set to None, then the root
      logger will be configured.  If not specified, then loggers for ``__main__`` and this package are configured.
    :param date_fmt: The datetime format code to use for timestamps
    :param entry_fmt: The stream handler log message format.  If not specified, the default is based on the specified
      verbosity - '%(message)s' is used when verbosity < 3, otherwise :data:`ENTRY_FMT_DETAILED` is used.
    :param file_fmt: The log message format to use for the log file.  Defaults to :data:`ENTRY_FMT_DETAILED`.
    :param file_lvl: The minimum log level that should be written to the log file, if configured.
    :param streams: Log to stdout and stderr (default: True).
    :param replace_handlers: Remove any existing handlers on loggers before adding handlers to them
    :param capture_warnings: Have the logging framework capture warnings instead of emitting them as warnings
    :return: The path to which logs are being written, or None if no file handler was configured.
    """
    verbosity = int(verbosity or 0)
    if 19 not in logging._levelToName:  # noqa
        logging.addLevelName(19, 'VERBOSE')

    loggers = _get_loggers(names, replace_handlers)
    root_logger = logging.getLogger()
    if root_logger in loggers:
        root_logger.addHandler(logging.NullHandler())       # Hide logs written directly to the root logger
    root_logger.setLevel(logging.NOTSET)                    # Default is 30 / WARNING

    date_fmt = date_fmt or '%Y-%m-%d %H:%M:%S %Z'
    if streams:
        _add_stream_handlers(loggers, verbosity, date_fmt, entry_fmt)

    if log_path is not None:
        log_path = Path(log_path).expanduser()
        _add_file_handler(loggers, log_path, date_fmt, file_fmt, file_lvl)

    if capture_warnings:
        logging.captureWarnings(True)

    return log_path


def _get_loggers(names: OptStrs, replace_handlers: bool) -> list[Logger]:
    if names is _NotSet:
        names = {__name__.split('.')[0], '__main__', 'py.warnings'}
    elif names is None or isinstance(names, str):
        names = {names}

    loggers = [logging.getLogger(name) for name in names]
    for logger in loggers:
        logger.setLevel(logging.NOTSET)  # Let handlers deal with log levels
        if replace_handlers:
            logger.handlers = []
    return loggers


def _add_stream_handlers(loggers: Collection[Logger], verbosity: int, date_fmt: str, entry_fmt: Optional[str] = None):
    entry_fmt = entry_fmt or (ENTRY_FMT_DETAILED if verbosity > 2 else '%(message)s')

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG + 2 - verbosity if verbosity else logging.INFO)
    stdout_handler.addFilter(create_filter(lambda r: r.levelno < logging.WARNING))
    stdout_handler.name = 'stdout'

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.INFO)
    stderr_handler.addFilter(create_filter(lambda r: r.levelno >= logging.WARNING))
    stderr_handler.name = 'stderr'

    formatter = DatetimeFormatter(entry_fmt, date_fmt)
    for handler in (stdout_handler, stderr_handler):
        handler.setFormatter(formatter)
        for logger in loggers:
            logger.addHandler(handler)


def _add_file_handler(
    loggers: Collection[Logger], log_path: Path, date_fmt: str, file_fmt: Optional[str], file_lvl: int
):
    from logging.handlers import TimedRotatingFileHandler

    prep_log_dir(log_path)
    file_handler = TimedRotatingFileHandler(log_path.as_posix(), when='midnight', backupCount=7, encoding='utf-8')
    file_handler.setLevel(file_lvl)
    file_handler.setFormatter(DatetimeFormatter(file_fmt or ENTRY_FMT_DETAILED, date_fmt))
    file_handler.name = log_path.as_posix()
    for logger in loggers:
        logger.addHandler(file_handler)
    log.log(19, f'Logging to {log_path.as_posix()}')


def create_filter(filter_fn: Callable[[LogRecord], bool]) -> Filter:
    """
    :param filter_fn: A function that takes 1 parameter (record) and returns True if the record should be logged
    :return: A custom, initialized subclass of logging.Filter using the given filter function
    """
    class CustomLogFilter(Filter):
        def filter(self, record: LogRecord) -> bool:
            return filter_fn(record)

    return CustomLogFilter()


class DatetimeFormatter(Formatter):
    """Enables use of ``%f`` (micro/milliseconds) in datetime formats."""
    _local_tz = get_localzone()

    def formatTime(self, record: LogRecord, datefmt: str = None) -> str:
        dt = datetime.fromtimestamp(record.created, self._local_tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            return self.default_msec_format % (dt.strftime(self.default_time_format), record.msecs)


def prep_log_dir(log_path: PathLike):
    """
    Creates any necessary intermediate directories in order for the given log path to be valid.

    :param log_path: Log file destination
    """
    log_dir = log_path.parent if isinstance(log_path, Path) else Path(log_path).parent
    if log_dir.exists():
        if not log_dir.is_dir():
            raise ValueError(f'Invalid log path - {log_dir} is not a directory')
    else:
        log_dir.mkdir(parents=True, exist_ok=True)
