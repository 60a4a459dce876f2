"""Common utilities for sourced-core.

This package provides reusable utilities like logging, config, tracing,
the default database handle and the rooted temporary filesystem.
"""

from sourced.common.database import DatabaseConnectionError, open_default_database
from sourced.common.tempfs import OSFilesystem, PathEscapeError, create_temporary_filesystem

__all__ = [
    "DatabaseConnectionError",
    "OSFilesystem",
    "PathEscapeError",
    "create_temporary_filesystem",
    "open_default_database",
]
