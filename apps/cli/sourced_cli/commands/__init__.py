"""sourced CLI commands package.

- config: show the effective configuration
- check: open and validate the default database
- tempdir: create the process temporary filesystem
- init_schema: create the store tables
"""

from pydantic import ValidationError


def describe_config_error(error: ValidationError) -> str:
    """One-line summary of a configuration error for console output."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "config"
    more = error.error_count() - 1
    suffix = f" (+{more} more)" if more else ""
    return f"Invalid configuration: {field}: {first['msg']}{suffix}"


__all__ = ["describe_config_error"]
