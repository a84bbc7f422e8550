"""
Core interfaces for crossrs-toolchain.

This module defines the two collaborators the resolution engine needs from the
real environment: searching PATH for an executable and running a process.
Everything else (classification, feature assembly) is pure, so tests replace
these interfaces with fakes instead of touching the filesystem or spawning
compilers.
"""

import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from .filesystem import find_executable


@dataclass(frozen=True)
class ProcessResult:
    """
    Outcome of a finished process.

    Attributes:
        returncode: Process exit status
        stdout: Captured standard output
        stderr: Captured standard error (compilers print search lists here)
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""


class ExecutableFinder(ABC):
    """
    Abstract interface for locating executables by name.
    """

    @abstractmethod
    def which(self, name: str) -> Optional[str]:
        """
        Look up an executable.

        Args:
            name: Executable name (e.g., "aarch64-linux-gnu-gcc")

        Returns:
            Absolute path to the executable, or None if it cannot be found
        """
        pass


class ProcessRunner(ABC):
    """
    Abstract interface for running a command with a bounded timeout.
    """

    @abstractmethod
    def run(self, args: Sequence[str], timeout: float) -> ProcessResult:
        """
        Run a command to completion.

        Args:
            args: Command line, program first
            timeout: Maximum wall time in seconds

        Returns:
            ProcessResult with exit status and captured output

        Raises:
            subprocess.TimeoutExpired: If the command exceeds the timeout
            OSError: If the program cannot be started
        """
        pass


class PathExecutableFinder(ExecutableFinder):
    """
    Find executables in a PATH-style directory list.

    Args:
        search_path: PATH string to search; None uses the process PATH
    """

    def __init__(self, search_path: Optional[str] = None):
        self.search_path = search_path

    def which(self, name: str) -> Optional[str]:
        found = find_executable(name, self.search_path)
        return str(found) if found else None


class SubprocessRunner(ProcessRunner):
    """Run commands with :func:`subprocess.run`, capturing text output.

    Output is decoded as UTF-8; undecodable bytes are replaced.
    """

    def run(self, args: Sequence[str], timeout: float) -> ProcessResult:
        result = subprocess.run(
            [str(arg) for arg in args],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
        return ProcessResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
