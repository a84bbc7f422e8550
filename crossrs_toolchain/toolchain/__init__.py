"""
Toolchain resolution module for crossrs-toolchain.

This module provides functionality for:
- Tool discovery from the cross-rs prefix/suffix convention
- Builtin include directory extraction
- The toolchain feature table
- Descriptor resolution (real or stub)
"""

from crossrs_toolchain.toolchain.discovery import (
    ToolDiscovery,
    ToolRole,
    ToolSet,
    expected_tool_names,
)
from crossrs_toolchain.toolchain.includes import (
    BuiltinIncludeExtractor,
    parse_search_list,
)
from crossrs_toolchain.toolchain.features import (
    ACTION_NAMES,
    Feature,
    FlagGroup,
    FlagSet,
    assemble_features,
    expand_features,
)
from crossrs_toolchain.toolchain.descriptor import (
    Resolution,
    ResolutionState,
    StubDescriptor,
    ToolchainDescriptor,
    ToolchainResolver,
    resolve_toolchain,
)

__all__ = [
    # Discovery
    "ToolDiscovery",
    "ToolRole",
    "ToolSet",
    "expected_tool_names",
    # Includes
    "BuiltinIncludeExtractor",
    "parse_search_list",
    # Features
    "ACTION_NAMES",
    "Feature",
    "FlagGroup",
    "FlagSet",
    "assemble_features",
    "expand_features",
    # Descriptor
    "Resolution",
    "ResolutionState",
    "StubDescriptor",
    "ToolchainDescriptor",
    "ToolchainResolver",
    "resolve_toolchain",
]
