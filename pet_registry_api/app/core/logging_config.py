"""
Logging setup for the pet registry.

Only the registry's own loggers are configured: ``pet_registry_api``
(services, store, endpoints, server entry point) and
``pet_registry_client``.  The root logger and the loggers of uvicorn
and FastAPI are left alone, so embedding the app in another process
does not change how that process logs.

Every record carries the timestamp, level, logger name and message.
Calling ``setup_logging`` again replaces the handlers it attached
earlier, so a second ``create_app`` with a different ``LOG_FILE``
writes to the new file instead of both.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional


REGISTRY_LOGGERS = ("pet_registry_api", "pet_registry_client")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers owned by this module so re-configuration can find them.
_HANDLER_FLAG = "_pet_registry_handler"


def _build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_FLAG, True)
    return handlers


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    names: Iterable[str] = REGISTRY_LOGGERS,
) -> None:
    """Attach console (and optional file) handlers to the registry loggers.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"info"``.  Unknown names
        fall back to ``INFO``.
    logfile : Optional[str]
        When given, records are also appended to this file.
    names : Iterable[str]
        Logger names to configure.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    for name in names:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if getattr(handler, _HANDLER_FLAG, False):
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(numeric_level)
        for handler in _build_handlers(logfile):
            logger.addHandler(handler)
