"""
Logging configuration for the grievance portal.
"""

import logging
import logging.config
from typing import Any, Dict, Optional

from config import settings


def build_logging_config(level: str, json_output: bool) -> Dict[str, Any]:
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': 'pythonjsonlogger.jsonlogger.JsonFormatter',
                'format': '%(asctime)s %(levelname)s %(name)s %(message)s'
            },
        },
        'handlers': {
            'console': {
                'level': level,
                'class': 'logging.StreamHandler',
                'formatter': 'json' if json_output else 'standard'
            },
        },
        'loggers': {
            '': {  # Root logger
                'handlers': ['console'],
                'level': level,
            },
            'uvicorn.access': {
                'handlers': ['console'],
                'level': 'INFO',
                'propagate': False
            },
            'pymongo': {
                'level': 'WARNING',
            },
        }
    }


def setup_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> logging.Logger:
    """Configure application logging"""
    level = (level or settings.LOG_LEVEL).upper()
    if json_output is None:
        json_output = settings.LOG_JSON
    logging.config.dictConfig(build_logging_config(level, json_output))
    logger = logging.getLogger("grievance")
    logger.info("Logging initialized with level: %s", level)
    return logger
