"""
Generate command implementation.

Resolves the toolchain and writes the repository BUILD.bazel.
"""

import logging

from crossrs_toolchain.bazel.build_file import write_build_file
from crossrs_toolchain.toolchain.descriptor import resolve_toolchain

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the generate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    resolution = resolve_toolchain()
    logger.debug(f"Arguments: {args}")

    build_file = write_build_file(
        resolution,
        args.output_dir,
        rules_label=args.rules_label,
        timeout=args.lock_timeout,
    )
    print(build_file)
    return 0
