"""
Cross-compilation target classification for crossrs-toolchain.

This module maps target triples to Bazel platform constraints.
"""

from crossrs_toolchain.cross.targets import (
    CPU_MAP,
    OS_MAP,
    PlatformConstraint,
    TargetTriple,
    classify,
    classify_cpu,
    classify_os,
)

__all__ = [
    "CPU_MAP",
    "OS_MAP",
    "PlatformConstraint",
    "TargetTriple",
    "classify",
    "classify_cpu",
    "classify_os",
]
