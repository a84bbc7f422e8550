"""
File system utilities for crossrs-toolchain.

This module provides the two file operations the generator needs:
- Executable lookup in a PATH-style search list
- Atomic writes for generated build files
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

# Platform detection
IS_WINDOWS = os.name == "nt"


# ============================================================================
# Path Utilities
# ============================================================================


def split_search_path(search_path: Optional[str] = None) -> List[Path]:
    """
    Split a PATH string into directories, dropping empty entries.

    Args:
        search_path: PATH-style string; None reads the process PATH

    Returns:
        List of directories in search order
    """
    if search_path is None:
        search_path = os.environ.get("PATH", "")
    return [Path(p) for p in search_path.split(os.pathsep) if p]


def find_executable(
    name: str, search_path: Union[str, List[Path], None] = None
) -> Optional[Path]:
    """
    Find an executable in the system PATH or provided search paths.

    Args:
        name: Executable name (e.g., 'gcc', 'aarch64-linux-gnu-ld')
        search_path: PATH-style string or list of directories to search;
            None uses the process PATH

    Returns:
        Absolute path to executable if found, None otherwise

    Example:
        >>> find_executable('gcc', '/usr/local/bin:/usr/bin')
        PosixPath('/usr/bin/gcc')
    """
    # Add Windows executable extensions
    extensions = [""] if not IS_WINDOWS else ["", ".exe", ".bat", ".cmd"]

    if isinstance(search_path, list):
        directories = search_path
    else:
        directories = split_search_path(search_path)

    for directory in directories:
        for ext in extensions:
            exe_path = directory / f"{name}{ext}"
            if exe_path.is_file() and os.access(exe_path, os.X_OK):
                return exe_path.absolute()

    return None


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: str, encoding: str = "utf-8"
) -> None:
    """
    Replace a text file in one step.

    Content goes to a hidden temporary sibling first, which then replaces
    ``file_path``. Readers see either the old or the new file, never a
    truncated one.

    Args:
        file_path: Path to write to
        content: Text content to write
        encoding: Text encoding

    Example:
        >>> atomic_write(repo_dir / "BUILD.bazel", render_build_file(stub))
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "w", encoding=encoding) as f:
            f.write(content)

        temp_path.replace(file_path)

    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
