"""Logging configuration using loguru."""

import sys
from pathlib import Path

from loguru import logger

from ..config.loader import get_config


def setup_logging(
    level: str = "INFO",
    format: str | None = None,
    format_type: str | None = None,
    file_path: str | None = None,
    max_file_size_mb: int = 10,
    backup_count: int = 3,
    include_timestamps: bool = True,
) -> None:
    """Set up logging handlers.

    Notes:
    - Accepts both `format` and `format_type`; `format_type` takes precedence.
    - Invalid logging level names fall back to 'INFO'.
    """
    logger.remove()

    chosen_format = format_type or format or "text"

    format_parts = []
    if include_timestamps:
        format_parts.append("<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>")
    format_parts.append("<level>{level: <8}</level>")
    format_parts.append("<cyan>{name}</cyan>")
    format_parts.append("<level>{message}</level>")

    if chosen_format == "json":
        log_format = "{message}"
        serialize = True
    else:
        log_format = " | ".join(format_parts)
        serialize = False

    safe_level = "INFO"
    try:
        logger.level(level)
        safe_level = level
    except (ValueError, TypeError):
        safe_level = "INFO"

    logger.add(
        sys.stderr,
        level=safe_level,
        format=log_format,
        serialize=serialize,
        colorize=chosen_format != "json",
    )

    if file_path:
        log_file_path = Path(file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file_path,
            level=safe_level,
            format=log_format,
            serialize=serialize,
            rotation=f"{max_file_size_mb} MB",
            retention=backup_count,
            encoding="utf-8",
        )

    if safe_level != level:
        logger.warning(f"Invalid logging level '{level}' provided; falling back to 'INFO'")


def configure_logging_from_config() -> None:
    """Configure logging using the current configuration."""
    config = get_config()

    setup_logging(
        level=config.logging.level,
        format_type=config.logging.format,
        file_path=config.logging.file_path,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
        include_timestamps=config.logging.include_timestamps,
    )


__all__ = ["configure_logging_from_config", "setup_logging"]
