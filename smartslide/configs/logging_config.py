"""
Logging configuration for SmartSlide (configs).
"""

import logging
import logging.config
import os
import sys
from typing import Any

from loguru import logger as loguru_logger

from smartslide.configs.config import config


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    enable_file_logging: bool = False,
    log_dir: str | None = None,
    component: str = "default",
) -> None:
    if log_level is None:
        log_level = config.log_level
    log_level = log_level.upper()

    if enable_file_logging and not log_file:
        log_file = "api.log" if component == "api" else f"{component}.log"

    logging_dict: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - "
                    "%(module)s - %(funcName)s - %(lineno)d - %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "level": log_level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            "smartslide": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "fastapi": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {"level": log_level, "handlers": ["console"]},
    }

    log_path: str | None = None
    if enable_file_logging and log_file:
        log_dir = log_dir or config.log_dir
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, log_file)

        logging_dict["handlers"]["file"] = {
            "level": "DEBUG",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_path,
            "maxBytes": 10485760,
            "backupCount": 5,
            "formatter": "detailed",
        }
        for logger_name in logging_dict["loggers"]:
            logging_dict["loggers"][logger_name]["handlers"].append("file")
        logging_dict["root"]["handlers"].append("file")

    logging.config.dictConfig(logging_dict)

    # loguru carries the application logs; keep its sinks aligned with the above
    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=log_level)
    if log_path:
        loguru_logger.add(
            log_path,
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            backtrace=False,
            diagnose=False,
        )
