"""
Centralized exception hierarchy for crossrs-toolchain.

This module defines all custom exceptions raised while resolving a toolchain
descriptor, so callers can catch a single base class at the outer boundary.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class CrossToolchainError(Exception):
    """Base exception for all crossrs-toolchain errors."""

    pass


class ConfigError(CrossToolchainError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Target Triple Exceptions
# ============================================================================


class TripleError(CrossToolchainError):
    """Base exception for target triple errors."""

    pass


class InvalidTripleError(TripleError):
    """Raised when a target triple has fewer than two dash-separated parts."""

    def __init__(self, triple: str):
        self.triple = triple
        super().__init__(f"Invalid target triple: {triple}")


# ============================================================================
# Tool Discovery Exceptions
# ============================================================================


class ToolDiscoveryError(CrossToolchainError):
    """Base exception for tool discovery errors."""

    pass


class MissingRequiredToolError(ToolDiscoveryError):
    """Raised when a mandatory tool cannot be found in the search path."""

    def __init__(self, tool_name: str, target_triple: str):
        self.tool_name = tool_name
        self.target_triple = target_triple
        super().__init__(
            f"Required tool '{tool_name}' not found in PATH "
            f"for target '{target_triple}'"
        )


# ============================================================================
# Build File Exceptions
# ============================================================================


class BuildFileError(CrossToolchainError):
    """Base exception for generated build file errors."""

    pass


class BuildFileLockTimeout(BuildFileError):
    """Raised when the build file lock cannot be acquired within timeout."""

    pass
