"""
Core functionality for crossrs-toolchain.

This package contains the foundational modules that other components depend on.
"""

from .environment import EnvironmentSnapshot, WATCHED_VARIABLES

from .interfaces import (
    ExecutableFinder,
    PathExecutableFinder,
    ProcessResult,
    ProcessRunner,
    SubprocessRunner,
)

from .exceptions import (
    CrossToolchainError,
    ConfigError,
    TripleError,
    InvalidTripleError,
    ToolDiscoveryError,
    MissingRequiredToolError,
    BuildFileError,
    BuildFileLockTimeout,
)

__all__ = [
    "EnvironmentSnapshot",
    "WATCHED_VARIABLES",
    "ExecutableFinder",
    "PathExecutableFinder",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "CrossToolchainError",
    "ConfigError",
    "TripleError",
    "InvalidTripleError",
    "ToolDiscoveryError",
    "MissingRequiredToolError",
    "BuildFileError",
    "BuildFileLockTimeout",
]
