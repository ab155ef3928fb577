"""Centralized logging configuration."""

import sys

from loguru import logger

from bookit.config import get_settings


log_format = ' | '.join(
    (
        '<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>',
        '<lvl>{level:<8}</>',
        '<c>{name}::{function}:{line}</>',
        '{message}',
    )
)


def configure_logging(settings=None):
    settings = settings or get_settings()

    logger.remove()  # Replace the default handler with the custom format
    logger.add(sys.stderr, format=log_format, level=settings.log_level)

    if settings.log_dir:
        logger.add(
            f'{settings.log_dir}/{{time:YYYY-MM-DD}}.log',
            format=log_format,
            level=settings.log_level,
            rotation='1 day',
            retention='30 days',
            compression='zip',
            enqueue=True,
        )
    return logger
