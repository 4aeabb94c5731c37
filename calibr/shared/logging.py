import logging
import os
from logging.handlers import RotatingFileHandler

EVENTS_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10
EVENTS_LOGGER_NAME = "event"


def _install_event_level() -> None:
    logging.addLevelName(EVENTS_LEVEL_NUM, "EVENT")

    def event(self, message, *args, **kws):
        if self.isEnabledFor(EVENTS_LEVEL_NUM):
            self._log(EVENTS_LEVEL_NUM, message, args, **kws)

    logging.Logger.event = event


def get_events_logger() -> logging.Logger:
    """Logger for ranking events (promotions, badge unlocks).

    Usable before ``setup_events_logger``; records then propagate to root.
    """
    _install_event_level()
    return logging.getLogger(EVENTS_LOGGER_NAME)


def setup_events_logger(full_path, events_retention_size):
    logger = get_events_logger()
    logger.setLevel(EVENTS_LEVEL_NUM)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    os.makedirs(full_path, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(full_path, "events.log"),
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(EVENTS_LEVEL_NUM)
    logger.addHandler(file_handler)

    return logger


def configure_logging(settings) -> logging.Logger:
    """Apply log level and optional events file from ``RankingSettings``."""
    level = logging.getLevelName(str(settings.log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {settings.log_level}")
    logging.getLogger("calibr").setLevel(level)

    if settings.log_dir is not None:
        return setup_events_logger(str(settings.log_dir), settings.events_retention_bytes)
    return get_events_logger()
