"""Log-level configuration shared by the command-line tools."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

LOG_LEVEL_ENV = "FVC_LOG_LEVEL"


def resolve_log_level(verbosity: int, *, environ: dict[str, str] | None = None) -> int:
    """Map a `-v` count to a logging level.

    With no `-v`, `FVC_LOG_LEVEL` (a level name such as `INFO`) is honoured
    and WARNING is the fallback.
    """
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    env = os.environ if environ is None else environ
    name = env.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(verbosity: int = 0, *, stream: TextIO | None = None) -> None:
    """Install a single stderr handler on the `fvc` logger.

    Timestamps are added from `-vv` (seconds) and `-vvv` (milliseconds).
    """
    if verbosity >= 3:
        fmt = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
    elif verbosity == 2:
        fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    else:
        fmt = "%(levelname)s: %(message)s"

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S"))

    package_logger = logging.getLogger("fvc")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(resolve_log_level(verbosity))
    package_logger.propagate = False
