import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Libraries whose INFO output drowns out the app's own messages
QUIET_LOGGERS = ("urllib3", "requests", "osmnx", "shapely", "geopandas")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure console and file logging for the app.

    Streamlit re-executes the script on every interaction; handlers are
    only installed the first time.

    Args:
        level: Level name; defaults to Config.LOG_LEVEL
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO))

    if not root.handlers:
        log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(exist_ok=True)

        formatter = logging.Formatter(LOG_FORMAT)
        for handler in (
            logging.StreamHandler(),
            RotatingFileHandler(log_dir / "app.log", maxBytes=1_000_000, backupCount=3),
        ):
            handler.setFormatter(formatter)
            root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
