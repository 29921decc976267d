"""
Root logger setup for the Dog Tracker API.

``setup_logging`` is called by ``create_app``.  Every record goes to
stderr and, when ``LOG_FILE`` is set, to that file as well.  Because
the factory runs once per test and once per reload, the setup leaves a
logger that already has handlers untouched.
"""

import logging
from pathlib import Path
from typing import List, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_from_name(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    return numeric_level if isinstance(numeric_level, int) else logging.INFO


def _build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    return handlers


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    root: Optional[logging.Logger] = None,
) -> bool:
    """Attach handlers to ``root`` (the root logger by default) unless it already has some.

    ``level`` is a level name such as ``"debug"``; unknown names mean
    ``INFO``.  Returns ``True`` when handlers were installed and
    ``False`` when an earlier configuration was kept.
    """
    root = root or logging.getLogger()
    if root.handlers:
        return False

    root.setLevel(_level_from_name(level))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _build_handlers(logfile):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return True
