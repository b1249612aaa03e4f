"""Logging setup for the daemon entrypoint.

Library modules only do `logger = logging.getLogger(__name__)`; the CLI calls
`setup_logging(...)` once.
"""

import logging
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def coerce_level(level: Union[int, str]) -> int:
    """Accept logging.INFO, "info" or "20"."""
    if isinstance(level, int):
        return level

    s = str(level).strip().upper()
    if s.isdigit():
        return int(s)
    try:
        return _LEVELS[s]
    except KeyError as e:
        raise ValueError(f"Unknown logging level: {level!r}") from e


def setup_logging(
    level: Union[int, str] = "INFO",
    *,
    fmt: str = DEFAULT_FORMAT,
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    handlers: list = []

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    handlers.append(console)

    if log_file is not None:
        p = Path(log_file)
        p.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(p, encoding="utf-8")
        fh.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
        handlers.append(fh)

    # force=True so repeated calls (tests, REPL) don't stack handlers
    logging.basicConfig(level=coerce_level(level), handlers=handlers, force=True)

    # SQL echo stays off unless asked for explicitly
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
