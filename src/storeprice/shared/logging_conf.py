# src/storeprice/shared/logging_conf.py
"""
Logging Configuration - Handlers for the CLI and Embedding Services

Configures the root logger once per process. Stdout is reserved for the
printed quote, so log records go to stderr unless stdout logging is asked
for, and optionally to a size-rotated storeprice.log file.

Files that USE this module:
- storeprice.app (setup_logging at startup)
- tests.test_logging_conf (unit tests)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional, Union
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "storeprice.log"


def resolve_level(level: Union[int, str]) -> int:
    """Numeric level for an int or a name like "debug"; unknown names give INFO."""
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _log_path(log_file: Optional[Union[str, Path]], log_dir: Optional[Union[str, Path]]) -> Optional[Path]:
    # log_dir wins over log_file
    if log_dir:
        return Path(log_dir) / LOG_FILE_NAME
    if log_file:
        return Path(log_file)
    return None


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    log_stdout: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> Optional[Path]:
    """
    Install root handlers, replacing any configured earlier.

    Args:
        level: Level number or name
        log_file: Rotating log file path
        log_dir: Directory for storeprice.log (takes precedence over log_file)
        log_stdout: Log to stdout (STOREPRICE_LOG_STDOUT)
        max_bytes: Rotation size of the log file
        backup_count: Rotated files kept

    Returns:
        Path of the log file, or None when logging only to a stream
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    path = _log_path(log_file, log_dir)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8",
        ))
    if log_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    elif path is None:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setFormatter(formatter)

    numeric_level = resolve_level(level)
    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)
    logging.getLogger(__name__).debug(
        "Logging configured: level=%s file=%s", logging.getLevelName(numeric_level), path or "-",
    )
    return path
