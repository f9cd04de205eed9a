"""
Skysweep Command Line Entry Point

File Purpose: Parse flags, configure logging, and wire config, auth and the sweep together
Primary Functions/Classes: build_parser, configure_logging, run, main
Inputs and Outputs (I/O): CLI flags and config.json in; console output and exit status out

Usage: skysweep [--only-posts | --only-reposts | --only-likes | --include-likes] [--dry-run] [-v]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .auth import AuthManager
from .categories import select_categories
from .cleanup import CleanupRunner, render_summary
from .client import RecordStore, XrpcClient
from .exceptions import AuthenticationError, ConfigError, ListError, handle_error
from .models import console
from .settings import CONFIG_FILENAME, load_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skysweep",
        description=(
            "Delete your own Bluesky posts, reposts and likes older than the "
            "retention window set by dayCount in config.json."
        ),
    )
    parser.add_argument("--only-posts", action="store_true", help="delete posts")
    parser.add_argument("--only-reposts", action="store_true", help="delete reposts")
    parser.add_argument("--only-likes", action="store_true", help="delete likes")
    parser.add_argument(
        "--include-likes",
        action="store_true",
        help="include likes with posts and reposts",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="list the records that would be deleted without deleting them",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
    )
    # urllib3 is noisy at DEBUG and would echo full request URLs
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def run(
    args: argparse.Namespace,
    config_path: Path = Path(CONFIG_FILENAME),
    store_factory: Callable[[str], RecordStore] = XrpcClient,
) -> int:
    """Run one sweep and return the process exit status."""
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        handle_error(console, e, "Loading config", show_details=True)
        return EXIT_FAILURE

    with store_factory(settings.base_url) as store:
        try:
            session = AuthManager(store).authenticate(settings)
        except AuthenticationError as e:
            handle_error(console, e, "Login", show_details=True)
            return EXIT_FAILURE

        categories = select_categories(
            only_posts=args.only_posts,
            only_reposts=args.only_reposts,
            only_likes=args.only_likes,
            include_likes=args.include_likes,
        )
        logger.info(
            "Sweeping %s older than %d days%s",
            ", ".join(c.plural for c in categories),
            settings.day_count,
            " (dry run)" if args.dry_run else "",
        )

        runner = CleanupRunner(
            store, settings, session, categories, dry_run=args.dry_run
        )
        try:
            summary = runner.run()
        except ListError as e:
            handle_error(console, e, "Listing records", show_details=True)
            return EXIT_FAILURE

    console.print()
    console.print(render_summary(summary))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        return run(args)
    except KeyboardInterrupt:
        console.print("\nInterrupted; records already deleted stay deleted.")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
