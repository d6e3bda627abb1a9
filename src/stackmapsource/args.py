"""Parse and organize app args."""

from collections.abc import Callable
from pathlib import Path

import typed_argparse as tap


class Args(tap.TypedArgs):
    """App args."""

    map_path: Path | None = tap.arg(
        positional=True,
        nargs="?",
        help=(
            "Source map file or directory to search for *.js.map files. "
            "Falls back to STACKMAPSOURCE_MAP_PATH or .stackmapsource/config.toml"
        ),
        default=None,
    )
    jobs: int = tap.arg(
        help="Number of threads used to resolve frames (default: 1)",
        default=1,
    )
    verbose: bool = tap.arg(help="Enables verbose (DEBUG) logging", default=False)
    version: bool = tap.arg(help="Show version and exit", default=False)


def bind_and_run(app_main: Callable[[Args], None]) -> None:
    """Parse args and run the app passing the parsed args."""
    tap.Parser(Args).bind(app_main).run()
