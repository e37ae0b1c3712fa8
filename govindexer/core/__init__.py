"""
Core infrastructure: settings, logging, exceptions and database plumbing.
"""

from .config import Settings, DatabaseConfig, VoteConflictPolicy, settings
from .logging import setup_logging, get_logger

__all__ = [
    "Settings",
    "DatabaseConfig",
    "VoteConflictPolicy",
    "settings",
    "setup_logging",
    "get_logger",
]
