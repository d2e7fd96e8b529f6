"""Logging configuration for DSA Tracker backend"""

import logging
from pathlib import Path
from logging.handlers import TimedRotatingFileHandler


class ProjectOnlyFilter(logging.Filter):
    """Filter to only allow logs from dsa_tracker.* modules"""

    def filter(self, record):
        return record.name.startswith('dsa_tracker.')


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> TimedRotatingFileHandler:
    handler = TimedRotatingFileHandler(
        filename=path,
        when='midnight',
        interval=1,
        backupCount=30,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_dir: Path | None = None, debug: bool = False) -> None:
    """Setup logging configuration for DSA Tracker backend

    INFO+ logs from all modules always go to the console (DEBUG+ when
    ``debug`` is set). When ``log_dir`` is given, three daily-rotated files
    are written there as well, keeping 30 days of history:

    - debug.log: DEBUG+ logs from dsa_tracker.* modules only
    - info.log: INFO+ logs from all modules
    - error.log: ERROR+ logs from all modules

    Args:
        log_dir: Directory for log files, or None for console only
        debug: Lower the console threshold to DEBUG
    """
    log_format = '%(asctime)s.%(msecs)03d - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'
    formatter = logging.Formatter(log_format, datefmt=date_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicate logs
    root_logger.handlers.clear()

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

        debug_handler = _rotating_handler(log_dir / "debug.log", logging.DEBUG, formatter)
        debug_handler.addFilter(ProjectOnlyFilter())
        root_logger.addHandler(debug_handler)

        root_logger.addHandler(_rotating_handler(log_dir / "info.log", logging.INFO, formatter))
        root_logger.addHandler(_rotating_handler(log_dir / "error.log", logging.ERROR, formatter))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized (log_dir={log_dir})")
