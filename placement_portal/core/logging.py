import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


LOG_FORMAT = "[{asctime}] [{levelname:<8}] {name}: {message}"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO, log_dir: Optional[str] = "logs") -> None:
    """Set up the logging configuration.

    Configures the root logger to write to the console and, when ``log_dir``
    is given, to a timestamped file inside it (one file per process start).
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT, style="{")
    root = logging.getLogger()
    root.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(exist_ok=True)
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
        file_handler = logging.FileHandler(
            filename=path / f"portal_{timestamp}.log", encoding="utf-8", mode="w"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # pymongo heartbeat chatter drowns out app logs at DEBUG
    logging.getLogger("pymongo").setLevel(max(level, logging.INFO))
