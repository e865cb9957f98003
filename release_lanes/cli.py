"""Command line entry point for running lanes"""

import argparse
import sys
import time
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.markup import escape  # type: ignore[import]
from rich.panel import Panel  # type: ignore[import]
from rich.table import Table  # type: ignore[import]

from . import lanes  # noqa: F401  registers the lanes
from .config import Settings, load_config
from .console import Icons, Reporter, console
from .context import LANES, LaneContext
from .errors import LaneError, UserError
from .runner import validate_tools


def convert_value(value: str) -> Any:
    """Booleans are passed as true/false, everything else stays a string"""
    if value == "true":
        return True
    if value == "false":
        return False
    return value


def parse_lane_options(pairs: List[str]) -> Dict[str, Any]:
    """Parse key:value lane options"""
    options: Dict[str, Any] = {}
    for pair in pairs:
        key, separator, value = pair.partition(":")
        if not separator or not key:
            raise UserError(f"Invalid lane option '{pair}' (expected key:value)")
        options[key] = convert_value(value)
    return options


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="lanes",
        description="Run release lanes for the MapboxMaps iOS SDK",
        epilog="""
Examples:
    lanes unit_tests
    lanes setup_code_signing project_path:Apps/Apps.xcodeproj target:Examples type:appstore
    lanes beta

Environment Variables:
    PROJECT_PATH: Xcode project to operate on (overrides the config file)
    APP_STORE_CONNECT_API_KEY_PATH: App Store Connect API key JSON (required for beta)
    GITHUB_OUTPUT: GitHub Actions step output file (build_number is appended)
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("lane", nargs="?", help="Name of the lane to run")
    parser.add_argument(
        "options", nargs="*", help="Lane options as key:value pairs"
    )
    parser.add_argument(
        "--config", type=Path, help="Path to configuration file (default: lanes.yaml)"
    )
    parser.add_argument(
        "--list", action="store_true", help="List the available lanes and exit"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print fastlane actions instead of running them",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show detailed command output"
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show critical errors and final result",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Show full stack traces on errors"
    )

    args = parser.parse_args(argv)
    if not args.list and not args.lane:
        parser.error("a lane name is required (use --list to see the lanes)")
    return args


def show_lanes() -> None:
    table = Table(title="Lanes", show_header=True, header_style="bold cyan")
    table.add_column("Lane", style="bold")
    table.add_column("Options", style="dim")
    table.add_column("Description")

    for name in sorted(LANES):
        spec = LANES[name]
        table.add_row(name, ", ".join(spec.options), spec.description)

    console.print(table)


def show_lane_summary(
    lane_name: str, ctx: LaneContext, start_time: float, reporter: Reporter
) -> None:
    """Show the executed fastlane steps and total duration"""
    duration = time.time() - start_time
    minutes = int(duration // 60)
    seconds = int(duration % 60)

    if reporter.quiet:
        console.print(f"{Icons.SUCCESS} Lane {lane_name} finished in {minutes}m {seconds}s")
        return

    table = Table(
        title=f"Lane {lane_name}", show_header=True, header_style="bold cyan"
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step")
    table.add_column("Time", justify="right")

    for index, step in enumerate(ctx.steps, start=1):
        elapsed = "[yellow]dry run[/yellow]" if step.dry_run else f"{step.elapsed:.1f}s"
        table.add_row(str(index), step.name, elapsed)

    reporter.table(table)
    console.print(
        f"{Icons.SUCCESS} [bold green]Lane {lane_name} finished in {minutes}m {seconds}s[/bold green]"
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point"""
    args = parse_arguments(argv)
    reporter = Reporter(verbose=args.verbose, quiet=args.quiet, debug=args.debug)

    if args.list:
        show_lanes()
        return

    start_time = time.time()

    try:
        options = parse_lane_options(args.options)
        config = load_config(args.config)
        settings = Settings.from_environ()
        ctx = LaneContext.create(config, settings, reporter, dry_run=args.dry_run)

        reporter.banner(
            f"Lane: {args.lane}",
            "Dry run, fastlane actions are printed only" if args.dry_run else "Running fastlane actions",
        )

        if not args.dry_run:
            validate_tools(
                {
                    "xcodebuild": "Xcode command line tools",
                    ctx.fastlane.command[0]: "fastlane",
                }
            )

        ctx.run_lane(args.lane, **options)
        show_lane_summary(args.lane, ctx, start_time, reporter)

    except LaneError as e:
        if not reporter.quiet:
            console.print()
            console.print(
                Panel(
                    f"[bold red]Lane {args.lane} failed[/bold red]\n\n{escape(str(e))}",
                    border_style="red",
                    padding=(1, 2),
                )
            )
        else:
            reporter.error(f"Error: {escape(str(e))}")
        if args.debug:
            traceback.print_exc()
        sys.exit(1)
    except KeyboardInterrupt:
        reporter.warning("Lane cancelled by user")
        sys.exit(1)
    except Exception as e:
        reporter.error(f"Unexpected error: {escape(str(e))}")
        if args.debug:
            traceback.print_exc()
        else:
            console.print("\nRun with --debug flag for full stack trace")
        sys.exit(1)


if __name__ == "__main__":
    main()
