"""
Logging configuration that keeps sealed session tokens out of log output
"""

import logging
import logging.config
import re
from typing import Dict, Any

# Fernet tokens are urlsafe base64 starting with the 0x80 version byte
TOKEN_PATTERN = re.compile(r"gAAAAA[A-Za-z0-9_\-]{20,}=*")
REDACTED = "[redacted-token]"


class TokenRedactionFilter(logging.Filter):
    """Filter to mask sealed session tokens in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite the record message with tokens masked."""
        message = record.getMessage()
        if TOKEN_PATTERN.search(message):
            record.msg = TOKEN_PATTERN.sub(REDACTED, message)
            record.args = None
        return True  # Never drop records, only rewrite them


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with session token redaction."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "token_redaction_filter": {
                "()": TokenRedactionFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["token_redaction_filter"]
            }
        },
        "loggers": {
            "sessionkeeper": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
