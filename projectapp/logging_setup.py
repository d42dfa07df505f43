"""
PROJECTAPP - Logging Setup
==========================
Configures root handlers once, from the command line entry point.
Library modules only create named loggers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


class _ConsoleFilter(logging.Filter):
    """Our own logs at any level; third-party logs only from ERROR up"""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "projectapp" or record.name.startswith("projectapp."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None
) -> None:
    """
    Console handler on stderr at the given level.
    With log_file, everything from DEBUG up is also written there.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Drop only handlers installed by an earlier call
    for h in list(root.handlers):
        if getattr(h, "_projectapp", False):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleFilter())
    ch._projectapp = True
    root.addHandler(ch)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        fh._projectapp = True
        root.addHandler(fh)

    logging.captureWarnings(True)
