import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 10_000_000  # 10MB


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(app_name: str = "timesheet-grid", log_dir: Optional[str] = None) -> None:
    """Configure application logging

    Args:
        app_name: Name to use for log files
        log_dir: Directory for the log files, defaults to $LOG_DIR or /data/logs

    """
    log_dir = Path(log_dir or os.getenv("LOG_DIR", "/data/logs"))
    os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    root_logger.addHandler(_rotating_handler(log_dir / f"{app_name}.log", logging.INFO, formatter))

    # Failed submits and failed week loads also land here
    root_logger.addHandler(_rotating_handler(log_dir / f"{app_name}-error.log", logging.ERROR, formatter))

    # httpx logs every backend request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
