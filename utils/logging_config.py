"""
Centralized Logging Configuration

- Log level and retention from config
- Daily rotation of logs/storefront.log
- Masking of customer PII and credentials before anything hits a handler
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Pattern

import config


class SecretMaskingFilter(logging.Filter):
    """
    Replaces sensitive values in log records with [REDACTED_*] markers.

    Masks:
    - Passwords and auth tokens (sign-in / sign-up)
    - E-mail addresses
    - Phone numbers from delivery details
    - Street addresses from delivery details
    """

    PATTERNS: list[tuple[Pattern, str]] = [
        # Tokens
        (re.compile(r'((?:access|refresh)?[_-]?token["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-\.]{16,})(["\']?)', re.IGNORECASE), r'\1[REDACTED_TOKEN]\3'),
        (re.compile(r'(Bearer\s+)([A-Za-z0-9_\-\.]+)', re.IGNORECASE), r'\1[REDACTED_BEARER_TOKEN]'),

        # Passwords
        (re.compile(r'(password["\']?\s*[:=]\s*["\']?)([^\s"\',]+)(["\']?)', re.IGNORECASE), r'\1[REDACTED_PASSWORD]\3'),

        # Email addresses
        (re.compile(r'\b([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b'), '[REDACTED_EMAIL]'),

        # Street addresses (delivery_address='...', street: ...)
        (re.compile(r'((?:delivery_)?(?:address|street)["\']?\s*[:=]\s*["\']?)([^"\',]{4,})(["\']?)', re.IGNORECASE), r'\1[REDACTED_ADDRESS]\3'),

        # Phone numbers: local 11-digit (01XXXXXXXXX) and international formats
        (re.compile(r'(?<![\w#])(\+?\d{1,3}[-.\s]?)?0?1\d{3}[-.\s]?\d{6}\b'), '[REDACTED_PHONE]'),
        (re.compile(r'(phone["\']?\s*[:=]\s*["\']?)([+\d][\d\s\-\.()]{6,})(["\']?)', re.IGNORECASE), r'\1[REDACTED_PHONE]\3'),
    ]

    def mask(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = self.mask(str(record.msg))
        if isinstance(record.args, tuple):
            record.args = tuple(self.mask(arg) if isinstance(arg, str) else arg for arg in record.args)
        # Modify, never drop
        return True


LOG_FORMAT = '%(asctime)s | %(name)-25s | %(levelname)-8s | %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Third-party loggers that drown the application at INFO
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")


def _build_handlers(log_file: Path, level: int, retention_days: int, mask_secrets: bool) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [
        logging.handlers.TimedRotatingFileHandler(
            filename=log_file, when="midnight", backupCount=retention_days, encoding="utf-8"
        ),
        logging.StreamHandler(),
    ]
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        if mask_secrets:
            handler.addFilter(SecretMaskingFilter())
    return handlers


def setup_logging(log_dir: Path | str = "logs") -> None:
    """
    Configure the root logger once at startup (Storefront.startup()).

    - level: config.LOG_LEVEL
    - <log_dir>/storefront.log rotated at midnight, config.LOG_RETENTION_DAYS kept
    - console output with the same format
    - PII masking on both handlers unless config.LOG_MASK_SECRETS is false
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    level_name = config.LOG_LEVEL.upper()
    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Replace, never stack: setup may run again in the same process
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in _build_handlers(log_dir / "storefront.log", level, config.LOG_RETENTION_DAYS,
                                   config.LOG_MASK_SECRETS):
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging initialized: level={level_name}, retention={config.LOG_RETENTION_DAYS} days, "
                 f"masking={'on' if config.LOG_MASK_SECRETS else 'off'}, "
                 f"environment={config.RUNTIME_ENVIRONMENT.value}")
