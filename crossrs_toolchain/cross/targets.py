"""
Target triple classification.

This module maps a Rust-style target triple (``arch-vendor-sys[-abi]``) to the
Bazel platform constraint pair ``(cpu, os)`` used to select a toolchain.

Both lookup tables are ordered tuples of pairs: several CPU keys are prefixes
of others and several OS keys are substrings of others, so the first match in
table order wins.

Unknown architectures fall back to ``x86_64`` and unknown systems to
``linux``. This keeps classification usable for targets added after the
tables were written; the fallback does not imply x86 hardware.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from ..core.exceptions import InvalidTripleError

logger = logging.getLogger(__name__)

DEFAULT_CPU = "x86_64"
DEFAULT_OS = "linux"

CPU_CONSTRAINT_PREFIX = "@platforms//cpu:"
OS_CONSTRAINT_PREFIX = "@platforms//os:"

# Rust arch -> Bazel CPU, limited to the constraints defined by @platforms
CPU_MAP: Tuple[Tuple[str, str], ...] = (
    # x86
    ("i386", "i386"),
    ("i586", "x86_32"),
    ("i686", "x86_32"),
    ("x86_64", "x86_64"),
    # ARM 64-bit
    ("aarch64", "aarch64"),
    ("arm64", "aarch64"),
    ("arm64_32", "arm64_32"),
    ("arm64e", "arm64e"),
    # ARM 32-bit
    ("armv8-m", "armv8-m"),  # Cortex-M23, M33, M35P
    ("armv7e-mf", "armv7e-mf"),  # Cortex-M4, M7 with FPU
    ("armv7e-m", "armv7e-m"),  # Cortex-M4, M7
    ("armv7-m", "armv7-m"),  # Cortex-M3
    ("armv7k", "armv7k"),  # Apple Watch
    ("armv7", "armv7"),
    ("armv6-m", "armv6-m"),  # Cortex-M0, M0+, M1
    ("arm", "aarch32"),
    # WebAssembly
    ("wasm32", "wasm32"),
    ("wasm64", "wasm64"),
    # PowerPC
    ("ppc", "ppc"),
    ("ppc32", "ppc32"),
    ("ppc64le", "ppc64le"),
    # RISC-V
    ("riscv32", "riscv32"),
    ("riscv64", "riscv64"),
    # MIPS
    ("mips64", "mips64"),
    # IBM System z
    ("s390x", "s390x"),
    # Cortex-R
    ("cortex-r52", "cortex-r52"),
    ("cortex-r82", "cortex-r82"),
)

# Substring of the full triple -> Bazel OS. "android" before "linux",
# "nixos" before "linux".
OS_MAP: Tuple[Tuple[str, str], ...] = (
    ("android", "android"),
    ("emscripten", "emscripten"),
    ("wasi", "wasi"),
    ("fuchsia", "fuchsia"),
    ("ios", "ios"),
    ("tvos", "tvos"),
    ("watchos", "watchos"),
    ("visionos", "visionos"),
    ("darwin", "osx"),
    ("qnx", "qnx"),
    ("windows", "windows"),
    ("nixos", "nixos"),
    ("linux", "linux"),
    ("freebsd", "freebsd"),
    ("netbsd", "netbsd"),
    ("openbsd", "openbsd"),
    ("haiku", "haiku"),
    ("vxworks", "vxworks"),
    ("chromiumos", "chromiumos"),
    ("uefi", "uefi"),
)


@dataclass(frozen=True)
class TargetTriple:
    """
    A validated target triple.

    Attributes:
        value: Raw triple string (e.g., 'armv7-linux-androideabi')
    """

    value: str

    def __post_init__(self):
        if len(self.value.split("-")) < 2:
            raise InvalidTripleError(self.value)

    @classmethod
    def parse(cls, value: Union[str, "TargetTriple"]) -> "TargetTriple":
        """
        Build a TargetTriple from a string, passing existing triples through.

        Raises:
            InvalidTripleError: If the string has fewer than two components
        """
        if isinstance(value, TargetTriple):
            return value
        return cls(value)

    @property
    def components(self) -> List[str]:
        return self.value.split("-")

    @property
    def arch(self) -> str:
        return self.components[0]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PlatformConstraint:
    """
    Bazel platform constraint pair for a triple.

    Attributes:
        cpu: CPU constraint name (e.g., 'aarch64')
        os: OS constraint name (e.g., 'linux')
    """

    cpu: str
    os: str

    def labels(self) -> List[str]:
        """
        Get the constraint labels.

        Example:
            >>> PlatformConstraint("aarch64", "linux").labels()
            ['@platforms//cpu:aarch64', '@platforms//os:linux']
        """
        return [CPU_CONSTRAINT_PREFIX + self.cpu, OS_CONSTRAINT_PREFIX + self.os]


def _lookup_exact(arch: str) -> Optional[str]:
    for key, value in CPU_MAP:
        if key == arch:
            return value
    return None


def _lookup_prefix(arch: str) -> Optional[str]:
    for key, value in CPU_MAP:
        if arch.startswith(key):
            return value
    return None


def _guess_arm_cpu(arch: str) -> Optional[str]:
    """Pick a CPU for ARM/Thumb spellings the table does not list."""
    if arch.startswith("armv"):
        if "armv8" in arch:
            return "armv8-m" if "m" in arch else "aarch64"
        if "armv7" in arch:
            if "m" in arch:
                return "armv7-m"
            if "k" in arch:
                return "armv7k"
            return "armv7"
        if "armv6" in arch:
            return "armv6-m"
        return "aarch32"

    if arch.startswith("thumb"):
        if "v8" in arch:
            return "armv8-m"
        if "v7" in arch:
            return "armv7e-m" if "em" in arch else "armv7-m"
        if "v6" in arch:
            return "armv6-m"
        return "aarch32"

    return None


def classify_cpu(arch: str) -> str:
    """
    Map a triple's architecture component to a Bazel CPU.

    Tries an exact table match, then the first table key ``arch`` starts
    with, then ARM/Thumb heuristics, then ``x86_64``.

    Args:
        arch: First component of a target triple

    Returns:
        Bazel CPU constraint name
    """
    cpu = _lookup_exact(arch) or _lookup_prefix(arch) or _guess_arm_cpu(arch)
    if cpu is None:
        logger.debug(f"Unknown architecture '{arch}', defaulting to {DEFAULT_CPU}")
        return DEFAULT_CPU
    return cpu


def classify_os(triple: str) -> str:
    """
    Map a full triple to a Bazel OS by first contained substring.

    Args:
        triple: Full target triple string

    Returns:
        Bazel OS constraint name
    """
    for key, value in OS_MAP:
        if key in triple:
            return value
    logger.debug(f"No known OS in '{triple}', defaulting to {DEFAULT_OS}")
    return DEFAULT_OS


def classify(triple: Union[str, TargetTriple]) -> PlatformConstraint:
    """
    Classify a target triple into a platform constraint pair.

    Args:
        triple: Target triple string or TargetTriple

    Returns:
        PlatformConstraint

    Raises:
        InvalidTripleError: If the triple has fewer than two components

    Example:
        >>> classify("armv7-linux-androideabi")
        PlatformConstraint(cpu='armv7', os='android')
    """
    parsed = TargetTriple.parse(triple)
    return PlatformConstraint(cpu=classify_cpu(parsed.arch), os=classify_os(parsed.value))
