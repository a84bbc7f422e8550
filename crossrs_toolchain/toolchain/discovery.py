"""
crossrs_toolchain/toolchain/discovery.py

Tool discovery - resolves the toolchain's executables from the cross-rs
prefix/suffix naming convention.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..core.exceptions import MissingRequiredToolError
from ..core.interfaces import ExecutableFinder, PathExecutableFinder

logger = logging.getLogger(__name__)

# Present on every POSIX host; does nothing and exits 0
NOOP_EXECUTABLE = "/usr/bin/true"

EMSCRIPTEN_PREFIX = "em"


class ToolRole(Enum):
    """Tool roles of a C/C++ toolchain, valued by their Bazel tool_path name."""

    C_COMPILER = "gcc"
    CXX_COMPILER = "g++"
    ARCHIVER = "ar"
    LINKER = "ld"
    STRIPPER = "strip"
    SYMBOL_LISTER = "nm"
    OBJECT_COPIER = "objcopy"
    OBJECT_DUMPER = "objdump"
    COVERAGE_TOOL = "gcov"
    DWARF_PACKAGER = "dwp"


REQUIRED_ROLES: Tuple[ToolRole, ...] = (
    ToolRole.C_COMPILER,
    ToolRole.CXX_COMPILER,
    ToolRole.ARCHIVER,
    ToolRole.LINKER,
)

OPTIONAL_ROLES: Tuple[ToolRole, ...] = (
    ToolRole.STRIPPER,
    ToolRole.SYMBOL_LISTER,
    ToolRole.OBJECT_COPIER,
    ToolRole.OBJECT_DUMPER,
)

# Never searched; always the C compiler
DERIVED_ROLES: Tuple[ToolRole, ...] = (
    ToolRole.COVERAGE_TOOL,
    ToolRole.DWARF_PACKAGER,
)

SEARCHED_ROLES: Tuple[ToolRole, ...] = REQUIRED_ROLES + OPTIONAL_ROLES

EMSCRIPTEN_TOOL_NAMES: Dict[ToolRole, str] = {
    ToolRole.C_COMPILER: "emcc",
    ToolRole.CXX_COMPILER: "em++",
    ToolRole.ARCHIVER: "emar",
    ToolRole.LINKER: "emcc",
    ToolRole.STRIPPER: "emstrip",
    ToolRole.SYMBOL_LISTER: "emnm",
    ToolRole.OBJECT_COPIER: "emcopy",
    ToolRole.OBJECT_DUMPER: "emdump",
}


def expected_tool_names(prefix: str, suffix: str) -> Dict[ToolRole, str]:
    """
    Compute the executable name for every searched role.

    Emscripten tools do not follow the ``prefix + base + suffix`` pattern, so
    the prefix ``em`` selects a fixed name table and ignores the suffix.

    Args:
        prefix: Tool name prefix (e.g., 'aarch64-linux-gnu-', '' for native)
        suffix: Tool name suffix (e.g., '-12')

    Returns:
        Mapping of role to executable name, in search order

    Example:
        >>> expected_tool_names("aarch64-linux-gnu-", "")[ToolRole.ARCHIVER]
        'aarch64-linux-gnu-ar'
    """
    if prefix == EMSCRIPTEN_PREFIX:
        return {role: EMSCRIPTEN_TOOL_NAMES[role] for role in SEARCHED_ROLES}
    return {role: f"{prefix}{role.value}{suffix}" for role in SEARCHED_ROLES}


@dataclass(frozen=True)
class ToolSet:
    """
    Absolute paths for every tool role.

    Attributes:
        paths: Tuple of (role, path) pairs covering all ToolRole members
    """

    paths: Tuple[Tuple[ToolRole, str], ...]

    def __post_init__(self):
        missing = [role for role in ToolRole if role not in dict(self.paths)]
        if missing:
            names = ", ".join(role.value for role in missing)
            raise ValueError(f"ToolSet is missing roles: {names}")

    @classmethod
    def from_mapping(cls, paths: Mapping[ToolRole, str]) -> "ToolSet":
        return cls(tuple((role, paths[role]) for role in ToolRole if role in paths))

    def __getitem__(self, role: ToolRole) -> str:
        return dict(self.paths)[role]

    def __iter__(self) -> Iterator[Tuple[ToolRole, str]]:
        return iter(self.paths)

    def tool_paths(self) -> List[Tuple[str, str]]:
        """
        Get the Bazel ``tool_path`` entries.

        The preprocessor entry ``cpp`` has no role of its own and uses the C++
        compiler.

        Returns:
            List of (name, path) pairs, eleven entries
        """
        entries = [
            ("gcc", self[ToolRole.C_COMPILER]),
            ("g++", self[ToolRole.CXX_COMPILER]),
            ("cpp", self[ToolRole.CXX_COMPILER]),
        ]
        for role in ToolRole:
            if role not in (ToolRole.C_COMPILER, ToolRole.CXX_COMPILER):
                entries.append((role.value, self[role]))
        return entries


class ResolutionStrategy(ABC):
    """
    One step of a tool resolution chain.

    Subclasses return a path or None; the chain moves on to the next
    strategy when None is returned.
    """

    @abstractmethod
    def resolve(
        self, role: ToolRole, tool_name: str, resolved: Mapping[ToolRole, str]
    ) -> Optional[str]:
        """
        Resolve a role to an executable path.

        Args:
            role: Role being resolved
            tool_name: Executable name computed for the role
            resolved: Roles resolved so far

        Returns:
            Path, or None to try the next strategy
        """
        pass


class SearchPathStrategy(ResolutionStrategy):
    """Look the computed tool name up on the search path."""

    def __init__(self, finder: ExecutableFinder):
        self.finder = finder

    def resolve(
        self, role: ToolRole, tool_name: str, resolved: Mapping[ToolRole, str]
    ) -> Optional[str]:
        path = self.finder.which(tool_name)
        if path:
            logger.debug(f"Found {role.value} as {tool_name}: {path}")
        else:
            logger.debug(f"{tool_name} not found on search path")
        return path


class ResolvedRoleStrategy(ResolutionStrategy):
    """Reuse the path of an already resolved role."""

    def __init__(self, source: ToolRole):
        self.source = source

    def resolve(
        self, role: ToolRole, tool_name: str, resolved: Mapping[ToolRole, str]
    ) -> Optional[str]:
        return resolved.get(self.source)


class NoOpStrategy(ResolutionStrategy):
    """Always resolve to an executable that does nothing."""

    def __init__(self, path: str = NOOP_EXECUTABLE):
        self.path = path

    def resolve(
        self, role: ToolRole, tool_name: str, resolved: Mapping[ToolRole, str]
    ) -> Optional[str]:
        return self.path


class ToolDiscovery:
    """
    Resolve every tool role to an absolute path.

    Mandatory roles (gcc, g++, ar, ld) are only searched for; optional roles
    fall back to the C compiler and then to a no-op executable, so a cross
    toolchain without auxiliary binutils still yields a complete ToolSet.

    Args:
        finder: Executable lookup (default: the process PATH)
        noop_executable: Last-resort path for optional roles
    """

    def __init__(
        self,
        finder: Optional[ExecutableFinder] = None,
        noop_executable: str = NOOP_EXECUTABLE,
    ):
        self.finder = finder or PathExecutableFinder()
        self.noop_executable = noop_executable

    def strategies_for(self, role: ToolRole) -> Sequence[ResolutionStrategy]:
        """
        Get the ordered resolution chain for a role.
        """
        search = SearchPathStrategy(self.finder)
        if role in REQUIRED_ROLES:
            return [search]
        if role in DERIVED_ROLES:
            return [
                ResolvedRoleStrategy(ToolRole.C_COMPILER),
                NoOpStrategy(self.noop_executable),
            ]
        return [
            search,
            ResolvedRoleStrategy(ToolRole.C_COMPILER),
            NoOpStrategy(self.noop_executable),
        ]

    def discover(self, prefix: str, suffix: str, target_triple: str) -> ToolSet:
        """
        Discover the toolchain's executables.

        Args:
            prefix: Tool name prefix ('' for native tools)
            suffix: Tool name suffix
            target_triple: Requested target, used in error messages

        Returns:
            ToolSet covering every ToolRole

        Raises:
            MissingRequiredToolError: If gcc, g++, ar or ld cannot be found
        """
        names = expected_tool_names(prefix, suffix)
        resolved: Dict[ToolRole, str] = {}

        logger.debug(
            f"Discovering tools for {target_triple} "
            f"(prefix='{prefix}', suffix='{suffix}')"
        )

        for role in SEARCHED_ROLES + DERIVED_ROLES:
            tool_name = names.get(role, role.value)
            path, strategy = self._resolve(role, tool_name, resolved)

            if path is None:
                raise MissingRequiredToolError(tool_name, target_triple)

            if role in OPTIONAL_ROLES and not isinstance(strategy, SearchPathStrategy):
                logger.warning(
                    f"Optional tool '{tool_name}' not found, using {path} instead"
                )

            resolved[role] = path

        return ToolSet.from_mapping(resolved)

    def _resolve(
        self, role: ToolRole, tool_name: str, resolved: Mapping[ToolRole, str]
    ) -> Tuple[Optional[str], Optional[ResolutionStrategy]]:
        for strategy in self.strategies_for(role):
            path = strategy.resolve(role, tool_name, resolved)
            if path:
                return path, strategy
        return None, None
