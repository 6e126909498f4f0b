"""
CLI Utilities Module.

Common utility functions for CLI tools.
"""

import logging
from pathlib import Path
from typing import Optional

from src.core.intervals import MalformedIntervalError, Window

logger = logging.getLogger(__name__)


def validate_database_path(db_path: str, allow_create: bool = False) -> bool:
    """
    Validate that a database file exists.

    Args:
        db_path: Path to the database file.
        allow_create: If True, allows non-existent databases (for seeding).

    Returns:
        True if valid, False otherwise.
    """
    if db_path == ":memory:":
        return True

    path = Path(db_path)

    if not path.exists():
        if allow_create:
            # Database will be created automatically by DatabaseService
            logger.debug(f"Database will be created: {db_path}")
            return True
        logger.error(f"Database file not found: {db_path}")
        return False

    return True


def parse_window(start: Optional[str], end: Optional[str]) -> Optional[Window]:
    """
    Builds a Window from optional --start/--end arguments.

    Returns:
        Window, or None when neither bound is given.

    Raises:
        ValueError: If only one bound is given, a bound is malformed, or end
            precedes start.
    """
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise ValueError("--start and --end must be given together")
    try:
        return Window.from_iso(start, end)
    except MalformedIntervalError as e:
        raise ValueError(str(e)) from e
