"""
Structured logging helpers for consistent log formatting.

Provides utilities for structured, clean logging without excessive decorative separators.
"""
import logging


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.info(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.info(f"Completed: {section_name}")


def log_playlist_summary(logger: logging.Logger, channels_count: int, groups_count: int) -> None:
    """Log the size of a freshly loaded playlist."""
    logger.info(f"Playlist loaded - Channels: {channels_count}, Groups: {groups_count}")


def log_guide_summary(
    logger: logging.Logger,
    channels_count: int,
    programs_count: int,
    names_count: int
) -> None:
    """
    Log guide load summary.

    Args:
        logger: Logger instance
        channels_count: Number of declared guide channels
        programs_count: Number of programmes kept after parsing
        names_count: Number of distinct normalized names in the reconciliation index
    """
    logger.info(
        f"Guide loaded - Channels: {channels_count}, Programs: {programs_count}, "
        f"Normalized names: {names_count}"
    )


def log_section_failed(logger: logging.Logger, section_name: str, error: Exception) -> None:
    """
    Log a processing section that ended with an error.

    Args:
        logger: Logger instance
        section_name: Name of the section that failed
        error: The exception that aborted it
    """
    logger.error(f"Failed: {section_name} ({error})")
