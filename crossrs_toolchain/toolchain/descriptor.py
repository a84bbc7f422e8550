"""
Toolchain descriptor resolution.

This module is the entry point of the engine. It turns an environment snapshot
into either a ToolchainDescriptor (real tools, real constraints) or a
StubDescriptor (impossible constraints) when the cross-rs variables are not
set, so that toolchain registration always succeeds but the stub is never
selected.

Resolution states:
    UNRESOLVED -> CLASSIFYING_TRIPLE -> DISCOVERING_TOOLS
        -> EXTRACTING_INCLUDES -> ASSEMBLED
    UNRESOLVED -> STUB

Classification and discovery errors propagate; there is no partial
descriptor. Include extraction never fails the resolution.

Usage:
    from crossrs_toolchain.toolchain.descriptor import resolve_toolchain

    resolution = resolve_toolchain()
    if resolution.is_stub:
        print("not in a cross-rs environment")
    else:
        print(resolution.constraint.labels())
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..core.environment import EnvironmentSnapshot
from ..core.interfaces import ExecutableFinder, PathExecutableFinder, ProcessRunner
from ..cross.targets import PlatformConstraint, TargetTriple, classify
from .discovery import ToolDiscovery, ToolRole, ToolSet
from .features import Feature, assemble_features
from .includes import BuiltinIncludeExtractor

logger = logging.getLogger(__name__)

IMPOSSIBLE_CONSTRAINT = "@platforms//os:none"

# cross-rs images run on x86_64 Linux hosts
EXEC_CONSTRAINTS: Tuple[str, ...] = (
    "@platforms//os:linux",
    "@platforms//cpu:x86_64",
)

TOOLCHAIN_IDENTIFIER_PREFIX = "cross_rs_toolchain_"


class ResolutionState(Enum):
    """States of a single resolution."""

    UNRESOLVED = "unresolved"
    CLASSIFYING_TRIPLE = "classifying_triple"
    DISCOVERING_TOOLS = "discovering_tools"
    EXTRACTING_INCLUDES = "extracting_includes"
    ASSEMBLED = "assembled"
    STUB = "stub"


@dataclass(frozen=True)
class ToolchainDescriptor:
    """
    Complete description of a discovered cross toolchain.

    Attributes:
        triple: Target triple
        constraint: Platform constraint pair for the triple
        tools: Paths for every tool role
        builtin_include_directories: Compiler search list, in order
        features: Feature table, in order
        fingerprint: Hash of the environment snapshot it was resolved from
        target_libc: Target C library
        compiler: Compiler family
        abi_version: ABI version
        abi_libc_version: libc ABI version
        host_system_name: Host system name
    """

    triple: TargetTriple
    constraint: PlatformConstraint
    tools: ToolSet
    builtin_include_directories: Tuple[str, ...]
    features: Tuple[Feature, ...]
    fingerprint: str = ""
    target_libc: str = "glibc"
    compiler: str = "gcc"
    abi_version: str = "unknown"
    abi_libc_version: str = "unknown"
    host_system_name: str = "local"

    is_stub = False

    @property
    def toolchain_identifier(self) -> str:
        return TOOLCHAIN_IDENTIFIER_PREFIX + self.triple.value

    @property
    def target_system_name(self) -> str:
        return self.triple.value

    @property
    def target_cpu(self) -> str:
        return self.triple.arch

    @property
    def exec_compatible_with(self) -> List[str]:
        return list(EXEC_CONSTRAINTS)

    @property
    def target_compatible_with(self) -> List[str]:
        return self.constraint.labels()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for serialization.

        Returns:
            Plain dictionary of strings and lists
        """
        return {
            "kind": "toolchain",
            "toolchain_identifier": self.toolchain_identifier,
            "target_triple": self.triple.value,
            "target_system_name": self.target_system_name,
            "target_cpu": self.target_cpu,
            "target_libc": self.target_libc,
            "compiler": self.compiler,
            "abi_version": self.abi_version,
            "abi_libc_version": self.abi_libc_version,
            "host_system_name": self.host_system_name,
            "platform": {"cpu": self.constraint.cpu, "os": self.constraint.os},
            "exec_compatible_with": self.exec_compatible_with,
            "target_compatible_with": self.target_compatible_with,
            "tool_paths": dict(self.tools.tool_paths()),
            "builtin_include_directories": list(self.builtin_include_directories),
            "features": [feature.to_dict() for feature in self.features],
            "fingerprint": self.fingerprint,
        }


@dataclass(frozen=True)
class StubDescriptor:
    """
    Placeholder toolchain that can never be selected.

    Attributes:
        reason: Why the real toolchain was not resolved
        fingerprint: Hash of the environment snapshot it was resolved from
    """

    reason: str = ""
    fingerprint: str = ""

    is_stub = True

    @property
    def exec_compatible_with(self) -> List[str]:
        return [IMPOSSIBLE_CONSTRAINT]

    @property
    def target_compatible_with(self) -> List[str]:
        return [IMPOSSIBLE_CONSTRAINT]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "stub",
            "reason": self.reason,
            "exec_compatible_with": self.exec_compatible_with,
            "target_compatible_with": self.target_compatible_with,
            "fingerprint": self.fingerprint,
        }


Resolution = Union[ToolchainDescriptor, StubDescriptor]


class ToolchainResolver:
    """
    Resolve a toolchain descriptor from an environment snapshot.

    Args:
        finder: Executable lookup; default searches the snapshot's PATH
        runner: Process runner for include extraction (default: subprocess)
        include_timeout: Seconds allowed for the compiler's include listing
    """

    def __init__(
        self,
        finder: Optional[ExecutableFinder] = None,
        runner: Optional[ProcessRunner] = None,
        include_timeout: float = 10,
    ):
        self.finder = finder
        self.runner = runner
        self.include_timeout = include_timeout
        self.state = ResolutionState.UNRESOLVED

    def _transition(self, state: ResolutionState) -> None:
        logger.debug(f"Resolution state: {self.state.value} -> {state.value}")
        self.state = state

    def resolve(self, snapshot: EnvironmentSnapshot) -> Resolution:
        """
        Resolve the toolchain for a snapshot.

        Args:
            snapshot: Environment variables driving resolution

        Returns:
            ToolchainDescriptor, or StubDescriptor if TARGET or
            CROSS_TOOLCHAIN_PREFIX is unset

        Raises:
            InvalidTripleError: If TARGET is not a valid triple
            MissingRequiredToolError: If a mandatory tool is missing
        """
        self.state = ResolutionState.UNRESOLVED
        fingerprint = snapshot.fingerprint()

        if not snapshot.is_active:
            missing = [
                name
                for name, value in (
                    ("TARGET", snapshot.target),
                    ("CROSS_TOOLCHAIN_PREFIX", snapshot.prefix),
                )
                if value is None
            ]
            reason = f"{' and '.join(missing)} not set"
            logger.info(f"Not in a cross-rs environment ({reason}), using stub toolchain")
            self._transition(ResolutionState.STUB)
            return StubDescriptor(reason=reason, fingerprint=fingerprint)

        self._transition(ResolutionState.CLASSIFYING_TRIPLE)
        triple = TargetTriple.parse(snapshot.target)
        constraint = classify(triple)

        self._transition(ResolutionState.DISCOVERING_TOOLS)
        finder = self.finder or PathExecutableFinder(snapshot.path)
        tools = ToolDiscovery(finder).discover(
            snapshot.prefix, snapshot.suffix, triple.value
        )

        self._transition(ResolutionState.EXTRACTING_INCLUDES)
        extractor = BuiltinIncludeExtractor(self.runner, timeout=self.include_timeout)
        include_dirs = extractor.extract(tools[ToolRole.CXX_COMPILER])

        descriptor = ToolchainDescriptor(
            triple=triple,
            constraint=constraint,
            tools=tools,
            builtin_include_directories=include_dirs,
            features=assemble_features(),
            fingerprint=fingerprint,
        )
        self._transition(ResolutionState.ASSEMBLED)

        logger.info(
            f"Resolved {descriptor.toolchain_identifier}: "
            f"cpu={constraint.cpu} os={constraint.os}, "
            f"{len(include_dirs)} builtin include directories"
        )
        return descriptor


def resolve_toolchain(
    environ: Optional[Mapping[str, str]] = None,
    finder: Optional[ExecutableFinder] = None,
    runner: Optional[ProcessRunner] = None,
) -> Resolution:
    """
    Resolve the toolchain from environment variables.

    Args:
        environ: Environment mapping (default: os.environ)
        finder: Executable lookup override
        runner: Process runner override

    Returns:
        ToolchainDescriptor or StubDescriptor
    """
    snapshot = EnvironmentSnapshot.from_environ(environ)
    return ToolchainResolver(finder=finder, runner=runner).resolve(snapshot)
