"""
crossrs-toolchain CLI argument parser.

This module implements the command-line interface using argparse. The CLI only
chooses output location, format and verbosity; the toolchain itself is always
resolved from the cross-rs environment variables.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from crossrs_toolchain.bazel.build_file import DEFAULT_RULES_LABEL
from crossrs_toolchain.core.exceptions import CrossToolchainError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("crossrs-toolchain")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """crossrs-toolchain command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="crossrs-toolchain",
            description="Generate a Bazel C/C++ toolchain from a cross-rs environment",
            epilog=(
                "The toolchain is resolved from TARGET, CROSS_TOOLCHAIN_PREFIX, "
                "CROSS_TOOLCHAIN_SUFFIX and PATH."
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"crossrs-toolchain {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_describe_command(subparsers)
        self._add_generate_command(subparsers)
        self._add_platforms_command(subparsers)

        return parser

    def _add_describe_command(self, subparsers):
        """Add 'describe' subcommand."""
        parser = subparsers.add_parser(
            "describe",
            help="Print the resolved toolchain descriptor",
            description="Resolve the toolchain from the environment and print it",
        )
        parser.add_argument(
            "--format",
            choices=["yaml", "json"],
            default="yaml",
            metavar="FORMAT",
            help="Output format (yaml|json) [default: yaml]",
        )

    def _add_generate_command(self, subparsers):
        """Add 'generate' subcommand."""
        parser = subparsers.add_parser(
            "generate",
            help="Write the toolchain BUILD.bazel",
            description="Resolve the toolchain and write BUILD.bazel",
        )
        parser.add_argument(
            "--output-dir",
            type=Path,
            default=Path.cwd(),
            metavar="DIR",
            help="Repository directory (default: current directory)",
        )
        parser.add_argument(
            "--rules-label",
            default=DEFAULT_RULES_LABEL,
            metavar="LABEL",
            help=f"Label of the rules .bzl file (default: {DEFAULT_RULES_LABEL})",
        )
        parser.add_argument(
            "--lock-timeout",
            type=float,
            default=30,
            metavar="SECONDS",
            help="Seconds to wait for the output lock (default: 30)",
        )

    def _add_platforms_command(self, subparsers):
        """Add 'platforms' subcommand."""
        parser = subparsers.add_parser(
            "platforms",
            help="Render platform definitions for target triples",
            description="Render one Bazel platform per target triple",
        )
        parser.add_argument(
            "triples", nargs="*", metavar="TRIPLE", help="Target triples"
        )
        parser.add_argument(
            "--targets-file",
            type=Path,
            metavar="PATH",
            help="YAML file with a 'targets' list",
        )
        parser.add_argument(
            "--output",
            type=Path,
            metavar="PATH",
            help="Write to file instead of stdout",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except CrossToolchainError as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        from crossrs_toolchain.cli.commands import describe, generate, platforms

        command_map = {
            "describe": describe.run,
            "generate": generate.run,
            "platforms": platforms.run,
        }

        handler = command_map.get(args.command)
        if not handler:
            logger.error(f"Unknown command: {args.command}")
            return 1

        return handler(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
