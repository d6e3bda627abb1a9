"""Version utility for stackmapsource."""

import sys
from importlib.metadata import PackageNotFoundError, version


def get_stackmapsource_version() -> str:
    """Return the installed version, or "unknown" when not installed."""
    try:
        return version("stackmapsource")
    except PackageNotFoundError:
        return "unknown"


def show_version() -> None:
    """Display the application version and exit."""
    app_version = get_stackmapsource_version()
    if app_version == "unknown":
        print("stackmapsource (version unknown)")  # noqa: T201
    else:
        print(f"stackmapsource {app_version}")  # noqa: T201
    sys.exit(0)
