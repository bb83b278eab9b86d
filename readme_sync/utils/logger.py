"""
Logger setup shared by the table and sync contexts.

Configures loguru sinks and writes a provenance header for each session.
Context-specific wrappers live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[dict] = None,
    console_level: str = "INFO",
) -> Optional[Path]:
    """
    Configure loguru for a sync session.

    Replaces the default handler with a colorized console sink and, when
    ``log_dir`` is given, a DEBUG-level file sink named ``{context_name}.log``.

    Args:
        context_name: Session identifier (e.g., "sync")
        log_dir: Directory for the session log file. Console only when None.
        extra_provenance: Additional key-value pairs for the provenance header
        console_level: Minimum level shown on the console

    Returns:
        Path to the log file, or None for console-only sessions

    Example:
        log_file = setup_logger(
            "sync",
            Path("outs/logs/sync_20251114_123456"),
            extra_provenance={"Repository": "owner/repo"},
        )
    """
    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(exist_ok=True, parents=True)
        log_file = log_dir / f"{context_name}.log"
        logger.add(log_file, format=FILE_FORMAT, level="DEBUG")

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Log script, command, working directory and Python version, plus extras."""
    logger.debug("=" * 80)
    logger.debug(f"Script: {sys.argv[0]}")
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.debug(f"{key}: {value}")

    logger.debug("=" * 80)
