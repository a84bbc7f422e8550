"""
Describe command implementation.

Prints the resolved toolchain descriptor.
"""

import logging

from crossrs_toolchain.cli.utils import format_data
from crossrs_toolchain.toolchain.descriptor import resolve_toolchain

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the describe command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    resolution = resolve_toolchain()
    if resolution.is_stub:
        logger.warning(f"Stub toolchain: {resolution.reason}")

    print(format_data(resolution.to_dict(), args.format), end="")
    return 0
