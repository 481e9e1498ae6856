import logging.config
import sys

from crossword_sync.core.config import settings


def configure_logging(level: str = None, error_file: str = None):
    """Install the console and error-file handlers for the whole process"""
    level = (level or settings.LOG_LEVEL).upper()
    error_file = error_file or settings.LOG_FILE

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,

        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
        },

        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": sys.stdout,
            },
            "file": {
                "level": "ERROR",
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "standard",
                "filename": error_file,
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "delay": True,
            },
        },

        "loggers": {
            "": {
                "handlers": ["console", "file"],
                "level": level,
                "propagate": True
            },
            "sqlalchemy.engine": {  # set to INFO to see SQL queries
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False
            },
        }
    }

    logging.config.dictConfig(logging_config)
