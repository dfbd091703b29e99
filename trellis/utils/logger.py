"""Logging helpers for Trellis.

All modules obtain loggers through :func:`get_logger` so they share the
``trellis`` namespace. Applications opt into output with
:func:`setup_logging`; the library itself never configures the root logger.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "trellis"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``trellis`` namespace.

    Module ``__name__`` values already start with ``trellis`` and are used
    as-is; anything else is nested below it.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """Configure console (and optional file) output for the ``trellis`` logger.

    Calling it again replaces the handlers installed by a previous call.

    Args:
        level: Standard logging level name.
        log_dir: If given, also write to ``<log_dir>/trellis.log``.

    Returns:
        The configured ``trellis`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        if getattr(handler, "_trellis_handler", False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._trellis_handler = True  # type: ignore[attr-defined]
    logger.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path / "trellis.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._trellis_handler = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    return logger
