"""
crossrs_toolchain/toolchain/includes.py

Builtin include detection - asks the compiler for its preprocessor search list.
"""

import logging
import subprocess
from typing import Iterable, Optional, Tuple, Union

from ..core.interfaces import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

SEARCH_START_MARKER = "#include <...> search starts here:"
SEARCH_END_MARKER = "End of search list."

DEFAULT_TIMEOUT = 10


def parse_search_list(output: Union[str, Iterable[str]]) -> Tuple[str, ...]:
    """
    Parse a compiler's ``-v`` diagnostic output for builtin include paths.

    Collects the lines between:
    - "#include <...> search starts here:"
    - "End of search list."

    Only lines starting with '/' are kept, and only their first
    space-separated token, which drops annotations like
    "(framework directory)". Without a start marker nothing is returned.

    Args:
        output: Diagnostic stream as text or as lines

    Returns:
        Include directories in search order

    Example:
        >>> parse_search_list(
        ...     "#include <...> search starts here:\\n /usr/include\\nEnd of search list.\\n"
        ... )
        ('/usr/include',)
    """
    lines = output.split("\n") if isinstance(output, str) else output
    include_dirs = []
    in_include_section = False

    for line in lines:
        line = line.strip()
        if line == SEARCH_START_MARKER:
            in_include_section = True
            continue
        elif line == SEARCH_END_MARKER:
            break
        elif in_include_section and line.startswith("/"):
            include_dirs.append(line.split(" ")[0])

    return tuple(include_dirs)


class BuiltinIncludeExtractor:
    """
    Extract builtin include directories by running the compiler once.

    Runs ``compiler -E -v -x c++ /dev/null`` and parses stderr. Any failure
    (non-zero exit, timeout, missing executable) yields an empty result,
    since missing builtin include information only affects header
    dependency checking, not the build itself.

    Args:
        runner: Process runner (default: subprocess)
        timeout: Seconds to wait for the compiler
    """

    def __init__(
        self, runner: Optional[ProcessRunner] = None, timeout: float = DEFAULT_TIMEOUT
    ):
        self.runner = runner or SubprocessRunner()
        self.timeout = timeout

    def command(self, compiler_path: str) -> list:
        return [compiler_path, "-E", "-v", "-x", "c++", "/dev/null"]

    def extract(self, compiler_path: Optional[str]) -> Tuple[str, ...]:
        """
        Extract builtin include directories from a compiler.

        Args:
            compiler_path: Path to the C++ compiler

        Returns:
            Include directories in search order, empty on any failure
        """
        if not compiler_path:
            return ()

        try:
            result = self.runner.run(self.command(compiler_path), timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.debug(f"Timeout extracting includes from {compiler_path}")
            return ()
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"Failed to extract includes from {compiler_path}: {e}")
            return ()

        if result.returncode != 0:
            logger.debug(
                f"Compiler {compiler_path} -E -v returned {result.returncode}"
            )
            return ()

        includes = parse_search_list(result.stderr)
        logger.debug(f"Extracted {len(includes)} include paths from {compiler_path}")
        return includes
