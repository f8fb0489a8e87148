"""
Logging setup for the contact deduplication engine.

Every module asks ``get_logger("<module>")`` for its logger. The first call
wires the shared ``contact_dedup`` base logger from the ``logging`` section of
``config/contact_dedup.yml``:

* one master log file for the whole run (``logs/contact_dedup.log``)
* one file per module (``logs/contact_dedup_<module>.log``), unless disabled
* a console stream, DEBUG when ``debug: true`` and INFO otherwise
* size-based rotation when ``rotate: true``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging import Logger, StreamHandler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from contact_dedup.config import get_config

PROJECT_ROOT = Path(__file__).resolve().parents[3]
BASE_LOGGER_NAME = "contact_dedup"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LogSettings:
    level: int = logging.INFO
    console_level: int = logging.INFO
    directory: Path = PROJECT_ROOT / "logs"
    master_file: str = "contact_dedup.log"
    per_module_files: bool = True
    rotate: bool = False
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 5

    @classmethod
    def from_config(cls, cfg: Any) -> "LogSettings":
        section = cfg.logging
        debug = bool(cfg.debug)

        level = getattr(logging, str(section.get("level", "INFO")).upper(), logging.INFO)

        directory = Path(section.get("dir") or cfg.paths.get("logs_dir") or "logs")
        if not directory.is_absolute():
            directory = PROJECT_ROOT / directory

        return cls(
            level=logging.DEBUG if debug else level,
            console_level=logging.DEBUG if debug else logging.INFO,
            directory=directory,
            master_file=section.get("file", "contact_dedup.log"),
            per_module_files=bool(section.get("per_module_files", True)),
            rotate=bool(section.get("rotate", False)),
            max_bytes=int(section.get("max_bytes", 5 * 1024 * 1024)),
            backup_count=int(section.get("backup_count", 5)),
        )


_settings: Optional[LogSettings] = None
_known: Dict[str, Logger] = {}


def _formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)


def _file_handler(settings: LogSettings, filename: str) -> logging.Handler:
    settings.directory.mkdir(parents=True, exist_ok=True)
    path = settings.directory / filename

    if settings.rotate:
        handler: logging.Handler = RotatingFileHandler(
            path,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
    else:
        handler = logging.FileHandler(path, encoding="utf-8")

    handler.setLevel(settings.level)
    handler.setFormatter(_formatter())
    return handler


def _setup_base() -> LogSettings:
    global _settings
    if _settings is not None:
        return _settings

    settings = LogSettings.from_config(get_config())

    base = logging.getLogger(BASE_LOGGER_NAME)
    base.setLevel(settings.level)
    base.propagate = False
    base.addHandler(_file_handler(settings, settings.master_file))

    console = StreamHandler()
    console.setLevel(settings.console_level)
    console.setFormatter(_formatter())
    base.addHandler(console)

    _settings = settings
    return settings


def _qualified_name(name: str) -> str:
    # Short names like "indexer" hang off the base logger so they inherit its handlers.
    if name == BASE_LOGGER_NAME or name.startswith(BASE_LOGGER_NAME + "."):
        return name
    return f"{BASE_LOGGER_NAME}.{name}"


def get_logger(name: str | None = None) -> Logger:
    """
    Return the project logger for ``name`` (default: the base logger).

    Module loggers propagate to the base logger's master file and console;
    each also gets its own file once.
    """
    settings = _setup_base()
    qualified = _qualified_name(name or BASE_LOGGER_NAME)
    logger = logging.getLogger(qualified)

    if qualified not in _known:
        logger.setLevel(settings.level)
        if qualified != BASE_LOGGER_NAME and settings.per_module_files:
            logger.addHandler(_file_handler(settings, qualified.replace(".", "_") + ".log"))
        _known[qualified] = logger

    return logger


def list_active_loggers() -> List[str]:
    """Names of every logger handed out so far."""
    return sorted(_known)


def reset_logging() -> None:
    """Close and detach every handler this module installed; the next get_logger rebuilds them."""
    global _settings
    for logger in [logging.getLogger(BASE_LOGGER_NAME), *_known.values()]:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
    _known.clear()
    _settings = None
