"""
Command-line interface for aarbind.

This module provides the `aarbind` CLI tool for packaging Go packages as an
Android library (.aar).
"""

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from aarbind import __version__
from aarbind.build import BindOrchestrator, CommandRunner, pipeline_stage
from aarbind.cli_utils import ErrorFormatter, TargetParser
from aarbind.config import BuildConfig
from aarbind.config.arch_specs import supported_archs
from aarbind.config.build_config import DEFAULT_MIN_API
from aarbind.errors import BindError
from aarbind.packages import PackageLoader


@dataclass
class BindArgs:
    """Arguments for the bind command."""

    packages: List[str] = field(default_factory=list)
    output: Optional[Path] = None
    target: Optional[str] = None
    android_api: int = DEFAULT_MIN_API
    classpath: Optional[str] = None
    libs: Optional[str] = None
    lib_dir: Optional[Path] = None
    work: Optional[Path] = None
    jobs: int = 1
    timeout: Optional[float] = None
    dry_run: bool = False
    print_commands: bool = False
    verbose: bool = False


def bind_command(args: BindArgs) -> None:
    """Package Go packages as an Android library.

    Examples:
        aarbind bind ./hello                         # hello.aar for all ABIs
        aarbind bind -o lib.aar ./hello ./world      # Two packages, one .aar
        aarbind bind --target android/arm64 ./hello  # Single architecture
        aarbind bind --libs crypto --libdir prebuilt ./hello
        aarbind bind -n ./hello                      # Print commands only
    """
    print(f"aarbind v{__version__}")
    print()

    try:
        with pipeline_stage("configure"):
            config = BuildConfig.from_environment(
                output=args.output,
                dry_run=args.dry_run,
                verbose=args.verbose,
                print_commands=args.print_commands,
                classpath=args.classpath,
                min_api=args.android_api,
                archs=TargetParser.parse_targets(args.target),
                native_libs=TargetParser.parse_list(args.libs),
                native_lib_dir=args.lib_dir,
                work_dir=args.work,
                jobs=args.jobs,
                tool_timeout=args.timeout,
            )

        runner = CommandRunner(
            base_env=config.base_env,
            dry_run=config.dry_run,
            print_commands=config.print_commands,
            timeout=config.tool_timeout,
        )

        with pipeline_stage("load"):
            loader = PackageLoader(runner, env={"GOOS": "android", "CGO_ENABLED": "1"})
            packages = loader.load(args.packages)

        if args.verbose:
            print(f"Binding packages: {', '.join(p.import_path for p in packages)}")
            print()
        else:
            print(f"Binding {packages[0].import_path}...")

        orchestrator = BindOrchestrator(config, runner=runner, show_progress=True)
        result = orchestrator.bind(packages)

        if config.dry_run:
            ErrorFormatter.print_success("Dry run complete, nothing was written")
        else:
            ErrorFormatter.print_success("Bind successful!")
            print()
            print(f"AAR:     {result.aar_path}")
            print(f"Sources: {result.sources_path}")
        print(f"ABIs:    {', '.join(result.archs)}")
        print(f"Time:    {result.build_time:.2f}s")
        sys.exit(0)

    except BindError as e:
        ErrorFormatter.handle_bind_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="aarbind",
        description="Package Go packages as an Android library (.aar)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"aarbind {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    bind_parser = subparsers.add_parser(
        "bind",
        help="Build an .aar and -sources.jar from Go packages",
    )
    bind_parser.add_argument(
        "packages",
        nargs="*",
        default=["."],
        help="Go packages to bind (default: current directory)",
    )
    bind_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output .aar file (default: <package>.aar)",
    )
    bind_parser.add_argument(
        "--target",
        default=None,
        help=(
            "Comma separated targets: android or android/<arch> with <arch> one of "
            f"{', '.join(supported_archs())} (default: android)"
        ),
    )
    bind_parser.add_argument(
        "--androidapi",
        dest="android_api",
        type=int,
        default=DEFAULT_MIN_API,
        help=f"Minimum Android API level (default: {DEFAULT_MIN_API})",
    )
    bind_parser.add_argument(
        "--classpath",
        default=None,
        help="Extra classpath for javac",
    )
    bind_parser.add_argument(
        "--libs",
        default=None,
        help="Comma separated auxiliary native libraries to bundle (lib<name>.so)",
    )
    bind_parser.add_argument(
        "--libdir",
        dest="lib_dir",
        type=Path,
        default=None,
        help="Directory holding <abi>/lib<name>.so prebuilts (default: ./libs)",
    )
    bind_parser.add_argument(
        "--work",
        type=Path,
        default=None,
        help="Keep intermediate files in this directory",
    )
    bind_parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Architectures to build in parallel (default: 1)",
    )
    bind_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds before an external tool is killed (default: no timeout)",
    )
    bind_parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help=(
            "Print the build commands but do not run them or write any output; "
            "go list still runs to resolve the packages"
        ),
    )
    bind_parser.add_argument(
        "-x",
        "--print-commands",
        action="store_true",
        help="Print the commands as they run",
    )
    bind_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output, including every archive entry",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    if parsed_args.command == "bind":
        bind_args = BindArgs(
            packages=parsed_args.packages,
            output=parsed_args.output,
            target=parsed_args.target,
            android_api=parsed_args.android_api,
            classpath=parsed_args.classpath,
            libs=parsed_args.libs,
            lib_dir=parsed_args.lib_dir,
            work=parsed_args.work,
            jobs=parsed_args.jobs,
            timeout=parsed_args.timeout,
            dry_run=parsed_args.dry_run,
            print_commands=parsed_args.print_commands,
            verbose=parsed_args.verbose,
        )
        bind_command(bind_args)


if __name__ == "__main__":
    main()
