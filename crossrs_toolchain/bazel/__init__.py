"""
Bazel output for crossrs-toolchain.

This module renders resolved toolchains and target platforms as Starlark.
"""

from crossrs_toolchain.bazel.build_file import (
    render_build_file,
    write_build_file,
)
from crossrs_toolchain.bazel.platforms import (
    load_target_list,
    platform_definitions,
)

__all__ = [
    "render_build_file",
    "write_build_file",
    "load_target_list",
    "platform_definitions",
]
