"""
Platforms command implementation.

Renders Bazel platform definitions for target triples.
"""

import logging

from crossrs_toolchain.bazel.platforms import load_target_list, platform_definitions
from crossrs_toolchain.cli.utils import write_output

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the platforms command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if no triples were given)
    """
    triples = list(args.triples)
    if args.targets_file:
        triples.extend(load_target_list(args.targets_file))

    if not triples:
        logger.error("No target triples given (pass TRIPLE or --targets-file)")
        return 1

    write_output(platform_definitions(triples), args.output)
    return 0
