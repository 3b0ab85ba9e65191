"""Logging utilities for consistent logging across modules."""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

LOG_DIR_ENV = "AUTOASSIGN_LOG_DIR"


def setup_logging(log_dir: Optional[str] = None) -> None:
    """Setup logging configuration.

    Messages always go to the console; when a log directory is given they are
    also appended to ``autoassign.log`` inside it.
    """
    handlers = [logging.StreamHandler()]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path / "autoassign.log"))
        os.environ[LOG_DIR_ENV] = str(log_path)

    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def log_server_message(message: str) -> None:
    """Log server-related messages."""
    logging.info(f"[SERVER] {message}")


def log_error(error_message: str, error_data: str = "") -> None:
    """Log an error, keeping the offending request data in its own file."""
    logging.error(f"[SERVER] {error_message}")

    log_dir = os.getenv(LOG_DIR_ENV)
    if not log_dir or not error_data:
        return

    try:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Create timestamped error log file
        timestamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
        error_file = log_path / f"error-{timestamp}.log"

        with open(error_file, "w", encoding="utf-8") as f:
            f.write(f"Error occurred at: {datetime.now().isoformat()}\n")
            f.write(f"Error message: {error_message}\n")
            f.write(f"Error data:\n{error_data}\n")

        logging.info(f"Error logged to: {error_file}")

    except OSError as e:
        logging.error(f"Failed to log error: {e}")
