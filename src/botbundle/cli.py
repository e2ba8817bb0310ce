"""
Command-line interface for botbundle.

This module provides the `botbundle` CLI tool that assembles a release
distribution of the music-bot: the release executable plus yt-dlp and ffmpeg
in dist/bin.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from . import __version__
from .build import BundleOrchestrator
from .cli_utils import BannerFormatter, ErrorFormatter, PathValidator, setup_logging
from .config import BundleConfig
from .errors import BundleError


@dataclass
class BundleArgs:
    """Arguments for the bundle command."""

    project_root: Optional[Path] = None
    dist_dir: Optional[Path] = None
    platform: Optional[str] = None
    build_timeout: Optional[float] = None
    fetch_timeout: Optional[float] = None
    parallel: Optional[bool] = None
    show_progress: bool = True
    verbose: bool = False


def bundle_command(args: BundleArgs) -> None:
    """Build the application and bundle it with its runtime dependencies.

    Examples:
        botbundle                          # Bundle for the host platform
        botbundle --platform windows       # Use the Windows dependency table
        botbundle --dist-dir /tmp/release  # Write the bundle elsewhere
        botbundle --parallel               # Fetch dependencies concurrently
    """
    BannerFormatter.print_banner(f"botbundle v{__version__} - music-bot release bundler")

    try:
        config = BundleConfig.from_env(
            project_root=args.project_root,
            dist_dir=args.dist_dir,
            platform=args.platform,
            build_timeout=args.build_timeout,
            fetch_read_timeout=args.fetch_timeout,
            parallel=args.parallel,
            show_progress=args.show_progress,
        )
        PathValidator.validate_project_dir(config.project_root)

        if args.verbose:
            print(f"Project: {config.project_root}")
            print(f"Platform: {config.platform}")
            print(f"Dist: {config.dist_dir}")
        print()

        result = BundleOrchestrator(config).run()

        if result.success:
            ErrorFormatter.print_success(f"Success: {result.message}")
            print()
            print(f"Executable: {result.artifact_path}")
            for resolved in result.resolved:
                origin = "downloaded" if resolved.fetched else "cached"
                print(f"  {resolved.name:<8} {resolved.path} ({origin})")
            print()
            print(f"Total time: {result.build_time:.2f}s")
            sys.exit(0)

        ErrorFormatter.handle_bundle_error(result.error or BundleError(result.message))

    except BundleError as e:
        ErrorFormatter.handle_bundle_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="botbundle",
        description="Assemble a self-contained music-bot distribution",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"botbundle {__version__}",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Project to build (default: $BOTBUNDLE_PROJECT_ROOT or the repository root)",
    )
    parser.add_argument(
        "--dist-dir",
        type=Path,
        default=None,
        help="Distribution directory (default: <project-root>/dist)",
    )
    parser.add_argument(
        "--platform",
        choices=["linux", "windows"],
        default=None,
        help="Target platform (default: host platform)",
    )
    parser.add_argument(
        "--build-timeout",
        type=float,
        default=None,
        help="Seconds to wait for the release build (default: 3600)",
    )
    parser.add_argument(
        "--fetch-timeout",
        type=float,
        default=None,
        help="Seconds to wait for each chunk of a download (default: 60)",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        default=None,
        help="Download dependencies concurrently",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not print status lines or progress bars",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parsed_args = build_parser().parse_args(argv)

    setup_logging(parsed_args.verbose)

    bundle_args = BundleArgs(
        project_root=parsed_args.project_root,
        dist_dir=parsed_args.dist_dir,
        platform=parsed_args.platform,
        build_timeout=parsed_args.build_timeout,
        fetch_timeout=parsed_args.fetch_timeout,
        parallel=parsed_args.parallel,
        show_progress=not parsed_args.no_progress,
        verbose=parsed_args.verbose,
    )
    bundle_command(bundle_args)


if __name__ == "__main__":
    main()
