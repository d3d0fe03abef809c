"""
Logging setup shared by the CLI and the HTTP service.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: Union[int, str] = logging.INFO, console: Optional[Console] = None) -> None:
    """Configure logging with Rich handler and set the root level."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(level)
