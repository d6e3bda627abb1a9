"""Utility functions and helpers for stackmapsource.

- file_discovery: recursive, failure-tolerant search for source map files
"""

from stackmapsource.utils.file_discovery import SOURCE_MAP_PATTERN, find_files

__all__ = ["SOURCE_MAP_PATTERN", "find_files"]
