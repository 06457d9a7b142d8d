# facematch/logging_config.py
import os
from pathlib import Path


def build_logging(log_dir: Path) -> dict:
    """dictConfig for Django's LOGGING setting; file logs go under `log_dir`."""
    log_dir = Path(log_dir)
    max_bytes = int(os.environ.get("LOG_MAX_BYTES", 10 * 1024 * 1024))
    days = int(os.environ.get("LOG_DAYS", 3))
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ascii_only": {"()": "facematch.filters.AsciiOnlyFilter"},
            "only_errors": {"()": "facematch.filters.ErrorLevelFilter"},
            "info_and_above": {"()": "facematch.filters.InfoAndAboveFilter"},
        },
        "formatters": {
            "standard": {
                "format": "%(levelname)s | %(name)s | %(asctime)s | line %(lineno)d | %(message)s",
                "datefmt": "%H:%M:%S",
            }
        },
        "handlers": {
            "app_stdout": {
                "class": "logging.StreamHandler",
                "level": "INFO",
                "formatter": "standard",
                "filters": ["ascii_only"],
            },
            "file_out": {
                "()": "facematch.logging_handlers.SizeAndTimeRotatingFileHandler",
                "level": "INFO",
                "formatter": "standard",
                "filename": str(log_dir / "facematch.log"),
                "max_bytes": max_bytes,
                "days": days,
                "delay": True,
                "filters": ["ascii_only", "info_and_above"],
            },
            "file_err": {
                "()": "facematch.logging_handlers.SizeAndTimeRotatingFileHandler",
                "level": "ERROR",
                "formatter": "standard",
                "filename": str(log_dir / "facematch_err.log"),
                "max_bytes": max_bytes,
                "days": days,
                "delay": True,
                "filters": ["ascii_only", "only_errors"],
            },
        },
        "loggers": {
            "app": {
                "handlers": ["app_stdout", "file_out", "file_err"],
                "level": os.environ.get("APP_LOG_LEVEL", "INFO"),
                "propagate": False,
            },
            "django": {
                "handlers": ["app_stdout", "file_err"],
                "level": "WARNING",
                "propagate": False,
            },
            # third-party noise
            "mlflow": {"level": "WARNING", "handlers": [], "propagate": True},
            "urllib3": {"level": "WARNING", "handlers": [], "propagate": False},
            "onnxruntime": {"level": "WARNING", "handlers": [], "propagate": True},
        },
        "root": {"level": "CRITICAL", "handlers": []},
    }
