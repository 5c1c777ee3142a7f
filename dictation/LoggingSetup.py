# dictation/LoggingSetup.py
import io
import sys
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_FILE_NAME = "dictation.log"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Ticks, injections and toggle requests run on different threads
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(threadName)s] %(message)s'

# Libraries that log every connection or key event at DEBUG
NOISY_LOGGERS = ("websockets", "pynput")


def _use_utf8_console() -> None:
    if hasattr(sys.stdout, 'buffer'):
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace', line_buffering=True)
        sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace', line_buffering=True)


def _reset_root_handlers(root_logger: logging.Logger) -> None:
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()


def setup_logging(logs_dir: Path, verbose: bool = False, is_frozen: bool = False) -> Path:
    """
    Route all dictation logging to a rotating file, plus the console when run
    from a terminal.

    Safe to call again: previous root handlers are closed and replaced.
    Dictated text is never logged above DEBUG, so the default INFO log only
    holds session lifecycle and failures.

    Args:
        logs_dir: Directory for dictation.log and its rotated backups
        verbose: DEBUG level including per-tick details; otherwise INFO
        is_frozen: Packaged app without a console, file output only

    Returns:
        Path of the active log file
    """
    if not is_frozen:
        _use_utf8_console()

    logs_dir.mkdir(parents=True, exist_ok=True)
    level = logging.DEBUG if verbose else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _reset_root_handlers(root_logger)

    formatter = logging.Formatter(LOG_FORMAT)
    log_file = logs_dir / LOG_FILE_NAME
    handlers = [RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding='utf-8'
    )]
    if not is_frozen:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    logging.info(f"Logging initialized: level={logging.getLevelName(level)}, "
                 f"frozen={is_frozen}, file={log_file}")
    return log_file
