"""stackmapsource CLI entry point."""

import io
import sys
from pathlib import Path

from dotenv import load_dotenv

from stackmapsource.args import Args, bind_and_run
from stackmapsource.config_loader import MAP_PATH_ENV_VAR, resolve_map_path
from stackmapsource.errors import EmptyTraceError
from stackmapsource.log import get_logger, init_logging
from stackmapsource.pipeline import write_translation
from stackmapsource.sourcemap.registry import SourceMapRegistry
from stackmapsource.version import show_version

EXIT_SUCCESS = 0
EXIT_NO_STACK = 1
EXIT_USAGE_ERROR = 2


def _read_stdin() -> str:
    reader = io.TextIOWrapper(
        sys.stdin.buffer,
        encoding="utf-8",
        errors="surrogateescape",
    )
    return reader.read()


def _prepare_stdout() -> None:
    # Undecodable input bytes are written back unchanged.
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding="utf-8", errors="surrogateescape")


def translate_stdin(args: Args) -> int:
    """Translate the stack trace on stdin and write it to stdout.

    Args:
        args: Parsed command line arguments.

    Returns:
        Process exit code.

    """
    logger = get_logger(__name__)

    if args.jobs < 1:
        logger.error("--jobs must be at least 1, got %d", args.jobs)
        return EXIT_USAGE_ERROR

    map_path = resolve_map_path(args)
    if map_path is None:
        logger.error(
            "No source map path given. Pass it as an argument or set %s.",
            MAP_PATH_ENV_VAR,
        )
        return EXIT_USAGE_ERROR

    registry = SourceMapRegistry()
    try:
        registry.initialize(map_path)
    except FileNotFoundError as err:
        logger.error("%s", err)  # noqa: TRY400
        return EXIT_USAGE_ERROR

    text = _read_stdin()
    _prepare_stdout()
    try:
        write_translation(text, registry, sys.stdout, jobs=args.jobs)
    except EmptyTraceError as err:
        logger.error("%s", err)  # noqa: TRY400
        return EXIT_NO_STACK
    sys.stdout.flush()
    return EXIT_SUCCESS


def run(args: Args) -> None:
    """Configure and run the translation."""
    if args.version:
        show_version()
    load_dotenv(
        dotenv_path=Path.cwd() / ".env",
        override=False,
    )  # Load environment variables from .env file in the current directory

    init_logging(args)
    sys.exit(translate_stdin(args))


def main() -> None:
    """Entry point for the CLI."""
    bind_and_run(run)


if __name__ == "__main__":
    main()
