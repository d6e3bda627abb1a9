"""File discovery utilities."""

import re
from pathlib import Path

from stackmapsource.log import get_logger

logger = get_logger(__name__)

SOURCE_MAP_PATTERN = re.compile(r".*\.js\.map$", re.IGNORECASE)
"""Names of source map files describing generated JavaScript."""


def find_files(folder: Path, name_pattern: re.Pattern[str]) -> list[Path]:
    """Recursively find files whose name matches a pattern.

    Entries are visited in sorted order, depth first, so a file in a
    subdirectory is listed at the position of that subdirectory. Entries
    that cannot be read are skipped.

    Args:
        folder: Directory to search.
        name_pattern: Pattern matched against each file name.

    Returns:
        Absolute paths of matching files in visiting order.

    """
    results: list[Path] = []
    _walk(folder, name_pattern, results, set())
    return results


def _walk(
    folder: Path,
    name_pattern: re.Pattern[str],
    results: list[Path],
    seen: set[Path],
) -> None:
    try:
        real_folder = folder.resolve()
        if real_folder in seen:
            logger.debug("Skipping already visited directory %s", folder)
            return
        seen.add(real_folder)
        items = sorted(folder.iterdir(), key=lambda p: p.name)
    except OSError as err:
        logger.debug("Skipping unreadable directory %s: %s", folder, err)
        return

    for item in items:
        try:
            if item.is_dir():
                _walk(item, name_pattern, results, seen)
            elif item.is_file() and name_pattern.match(item.name):
                results.append(item.absolute())
        except OSError as err:
            logger.debug("Skipping unreadable entry %s: %s", item, err)
