"""Configuration loader for stackmapsource."""

import logging
import os
import tomllib
from pathlib import Path

from stackmapsource.args import Args

logger = logging.getLogger(__name__)

MAP_PATH_ENV_VAR = "STACKMAPSOURCE_MAP_PATH"
CONFIG_DIR_NAME = ".stackmapsource"
CONFIG_FILE_NAME = "config.toml"


def _load_from_toml(config_path: Path) -> Path | None:
    if not config_path.exists():
        return None
    try:
        with config_path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Failed to load config %s: %s", config_path, e)
        return None

    map_path = config.get("map_path")
    if not map_path:
        return None

    path = Path(str(map_path)).expanduser()
    if not path.is_absolute():
        # Relative to the directory holding .stackmapsource/
        path = config_path.parent.parent / path
    return path


def resolve_map_path(args: Args, cwd: Path | None = None) -> Path | None:
    """Find the source map path with priority: CLI > env > local > global.

    Args:
        args: Parsed command line arguments
        cwd: Directory to look for local configuration in (default: cwd)

    Returns:
        Source map file or directory, or None if not configured anywhere

    """
    # Priority 1: Command line argument
    if args.map_path:
        return args.map_path

    # Priority 2: Environment, possibly populated from .env
    env_value = os.environ.get(MAP_PATH_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()

    # Priority 3: Local configuration
    work_dir = cwd or Path.cwd()
    local_path = _load_from_toml(work_dir / CONFIG_DIR_NAME / CONFIG_FILE_NAME)
    if local_path:
        return local_path

    # Priority 4: Global configuration
    return _load_from_toml(Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME)
