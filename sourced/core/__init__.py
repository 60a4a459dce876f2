"""Process-wide resource container.

Import accessors directly from ``sourced.core.container``:
    from sourced.core.container import get_database, get_temporary_filesystem
"""
