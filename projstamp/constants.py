"""
Application constants and logging setup.
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional

from version import get_version

# --- Configuration Constants ---
APP_NAME = "projstamp"
APP_VERSION = get_version()
LOG_DIR = Path.home() / ".cache" / "projstamp"
DEFAULT_LOG_FILE_NAME = "projstamp.log"
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

# --- Logging Setup ---
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "NONE": None,  # Disables logging entirely
}

# Create logger
logger = logging.getLogger("projstamp")

# Track current log file path (set by setup_logging)
current_log_file_path: Optional[Path] = None


def setup_logging(config: Optional[Dict] = None):
    """Configure logging from the ``logging`` section of the config."""
    global current_log_file_path

    log_cfg = config.get("logging", {}) if config else {}
    log_level_str = str(log_cfg.get("level", "WARNING")).upper()
    log_level = LOG_LEVELS.get(log_level_str, logging.WARNING)
    log_to_file = log_cfg.get("log_to_file", False)
    log_file = Path(log_cfg.get("log_file", DEFAULT_LOG_FILE_NAME)).expanduser()

    # Clear existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # If logging is disabled (NONE), set to highest level and skip handlers
    if log_level is None:
        logger.setLevel(logging.CRITICAL + 10)
        current_log_file_path = None
        return

    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler; stdout is reserved for stamp records
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (rotating: 2 MB max, keep 3 backups)
    if log_to_file:
        if not log_file.is_absolute():
            log_file = LOG_DIR / log_file
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=2 * 1024 * 1024,  # 2 MB
                backupCount=3,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            current_log_file_path = log_file
        except OSError as e:
            print(f"Failed to create log file: {e}", file=sys.stderr)
            current_log_file_path = None
    else:
        current_log_file_path = None

    logger.setLevel(log_level)
