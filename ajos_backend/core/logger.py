"""
Unified logging system
Console output plus a rotating application log and a separate error log,
configured from the [logging] section
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Optional

from config.loader import get_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
)

# httpx logs every request at INFO; storage already logs failures itself
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

_SIZE_UNITS = {"KB": 1024, "MB": 1024**2, "GB": 1024**3}


def parse_size(value) -> int:
    """'10MB' -> bytes; plain numbers are taken as bytes"""
    text = str(value).strip().upper()
    for unit, factor in _SIZE_UNITS.items():
        if text.endswith(unit):
            return int(text[: -len(unit)]) * factor
    return int(text)


class LoggerManager:
    """Log manager"""

    def __init__(self):
        self._loggers: Dict[str, logging.Logger] = {}
        self._setup_root_logger()

    @staticmethod
    def _logs_dir(config) -> Path:
        configured = config.get("logging.logs_dir")
        if configured:
            return Path(configured).expanduser()
        return Path(config.config_file).parent / "logs"

    @staticmethod
    def _rotating_handler(
        path: Path, level: int, max_bytes: int, backup_count: int
    ) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        return handler

    def _setup_root_logger(self):
        config = get_config()

        level_name = str(config.get("logging.level", "INFO")).upper()
        max_bytes = parse_size(config.get("logging.max_file_size", "10MB"))
        backup_count = int(config.get("logging.backup_count", 5))
        logs_dir = self._logs_dir(config)
        logs_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, level_name, logging.INFO))
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)

        root_logger.addHandler(
            self._rotating_handler(
                logs_dir / "ajos_backend.log", logging.DEBUG, max_bytes, backup_count
            )
        )
        root_logger.addHandler(
            self._rotating_handler(
                logs_dir / "error.log", logging.ERROR, max_bytes, backup_count
            )
        )

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    def get_logger(self, name: str) -> logging.Logger:
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
        return self._loggers[name]


# Created on first use so the configuration file is resolved before logging starts
_logger_manager: Optional[LoggerManager] = None


def get_logger(name: str) -> logging.Logger:
    """Convenience function to get logger"""
    global _logger_manager

    if _logger_manager is None:
        _logger_manager = LoggerManager()

    return _logger_manager.get_logger(name)


def setup_logging():
    """(Re)apply the [logging] configuration, e.g. after the CLI picked a config file"""
    global _logger_manager

    if _logger_manager is None:
        _logger_manager = LoggerManager()
    else:
        _logger_manager._setup_root_logger()
