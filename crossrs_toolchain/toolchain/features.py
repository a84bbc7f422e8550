"""
Feature table for the generated C/C++ toolchain.

This module builds the ordered list of Bazel toolchain features: default
compile and link flags, followed by the features that expand build variables
(user flags, defines, include paths, library directories, linkstamps).

Order matters. User flags come after the defaults so they can override them,
and include paths keep the compiler's search order (forced includes, then
quote, plain and system include paths).

Usage:
    from crossrs_toolchain.toolchain.features import (
        assemble_features, expand_features, ACTION_NAMES,
    )

    features = assemble_features()
    argv = expand_features(
        features,
        ACTION_NAMES.cpp_compile,
        {"user_compile_flags": ["-O2"], "preprocessor_defines": ["NDEBUG"]},
    )
"""

import re
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

# Bazel's ACTION_NAMES (@bazel_tools//tools/build_defs/cc:action_names.bzl)
ACTION_NAMES = SimpleNamespace(
    c_compile="c-compile",
    cpp_compile="c++-compile",
    linkstamp_compile="linkstamp-compile",
    assemble="assemble",
    preprocess_assemble="preprocess-assemble",
    cpp_header_parsing="c++-header-parsing",
    cpp_module_compile="c++-module-compile",
    cpp_module_codegen="c++-module-codegen",
    lto_backend="lto-backend",
    clif_match="clif-match",
    cpp_link_executable="c++-link-executable",
    cpp_link_dynamic_library="c++-link-dynamic-library",
    cpp_link_nodeps_dynamic_library="c++-link-nodeps-dynamic-library",
)

ALL_COMPILE_ACTIONS: Tuple[str, ...] = (
    ACTION_NAMES.c_compile,
    ACTION_NAMES.cpp_compile,
    ACTION_NAMES.linkstamp_compile,
    ACTION_NAMES.assemble,
    ACTION_NAMES.preprocess_assemble,
    ACTION_NAMES.cpp_header_parsing,
    ACTION_NAMES.cpp_module_compile,
    ACTION_NAMES.cpp_module_codegen,
    ACTION_NAMES.lto_backend,
    ACTION_NAMES.clif_match,
)

ALL_CXX_COMPILE_ACTIONS: Tuple[str, ...] = (
    ACTION_NAMES.cpp_compile,
    ACTION_NAMES.cpp_header_parsing,
    ACTION_NAMES.cpp_module_compile,
    ACTION_NAMES.cpp_module_codegen,
)

ALL_LINK_ACTIONS: Tuple[str, ...] = (
    ACTION_NAMES.cpp_link_executable,
    ACTION_NAMES.cpp_link_dynamic_library,
    ACTION_NAMES.cpp_link_nodeps_dynamic_library,
)

DEFAULT_COMPILE_FLAGS: Tuple[str, ...] = (
    "-no-canonical-prefixes",
    "-fdata-sections",
    "-ffunction-sections",
    "-g",
    "-fPIC",
)

DEFAULT_CXX_FLAGS: Tuple[str, ...] = ("-std=c++17",)

DEFAULT_LINK_FLAGS: Tuple[str, ...] = (
    "-no-canonical-prefixes",
    "-Wl,--gc-sections",
    "-Wl,--build-id=md5",
    "-lc",
    "-lm",
    "-latomic",
    "-ldl",
    "-lstdc++",
)

FEATURE_ORDER: Tuple[str, ...] = (
    "default_compile_flags",
    "default_link_flags",
    "user_compile_flags",
    "user_link_flags",
    "preprocessor_defines",
    "include_paths",
    "library_search_directories",
    "linkstamp_paths",
)

_PLACEHOLDER = re.compile(r"%\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True)
class FlagGroup:
    """
    A group of flags, optionally repeated for every entry of a variable.

    Attributes:
        flags: Flag templates; ``%{name}`` expands to the current entry
        iterate_over: Variable whose entries the group repeats over
        expand_if_available: Variable that must be present and non-empty
    """

    flags: Tuple[str, ...]
    iterate_over: Optional[str] = None
    expand_if_available: Optional[str] = None

    def expand(self, variables: Mapping[str, Sequence[str]]) -> List[str]:
        """
        Expand the group against build variables.

        Args:
            variables: Variable name to list of values

        Returns:
            Command-line flags, in order
        """
        if self.expand_if_available and not variables.get(self.expand_if_available):
            return []

        if self.iterate_over is None:
            return [_substitute(flag, self.iterate_over, "") for flag in self.flags]

        expanded = []
        for entry in variables.get(self.iterate_over, ()):
            expanded.extend(
                _substitute(flag, self.iterate_over, entry) for flag in self.flags
            )
        return expanded


@dataclass(frozen=True)
class FlagSet:
    """
    Flag groups applied to a set of actions.

    Attributes:
        actions: Action names this set applies to
        flag_groups: Groups expanded in order
    """

    actions: Tuple[str, ...]
    flag_groups: Tuple[FlagGroup, ...]

    def expand(self, action: str, variables: Mapping[str, Sequence[str]]) -> List[str]:
        if action not in self.actions:
            return []
        flags: List[str] = []
        for group in self.flag_groups:
            flags.extend(group.expand(variables))
        return flags


@dataclass(frozen=True)
class Feature:
    """
    A named toolchain feature.

    Attributes:
        name: Feature name as seen by Bazel
        enabled: Whether the feature is on by default
        flag_sets: Flag sets in order
    """

    name: str
    enabled: bool = True
    flag_sets: Tuple[FlagSet, ...] = field(default_factory=tuple)

    def expand(self, action: str, variables: Mapping[str, Sequence[str]]) -> List[str]:
        if not self.enabled:
            return []
        flags: List[str] = []
        for flag_set in self.flag_sets:
            flags.extend(flag_set.expand(action, variables))
        return flags

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "enabled": self.enabled,
            "flag_sets": [
                {
                    "actions": list(flag_set.actions),
                    "flag_groups": [
                        {
                            key: value
                            for key, value in (
                                ("flags", list(group.flags)),
                                ("iterate_over", group.iterate_over),
                                ("expand_if_available", group.expand_if_available),
                            )
                            if value is not None
                        }
                        for group in flag_set.flag_groups
                    ],
                }
                for flag_set in self.flag_sets
            ],
        }


def _substitute(flag: str, variable: Optional[str], value: str) -> str:
    def replace(match):
        if match.group(1) != variable:
            raise ValueError(
                f"Flag '{flag}' references %{{{match.group(1)}}} "
                f"outside of an iteration over it"
            )
        return value

    return _PLACEHOLDER.sub(replace, flag)


def flag_set(
    actions: Sequence[str],
    flags: Optional[Sequence[str]] = None,
    flag_groups: Optional[Sequence[FlagGroup]] = None,
) -> FlagSet:
    """
    Build a FlagSet, accepting a plain flag list as shorthand.

    Raises:
        ValueError: If both ``flags`` and ``flag_groups`` are given
    """
    if flags:
        if flag_groups:
            raise ValueError("Cannot set flags and flag_groups")
        flag_groups = [FlagGroup(flags=tuple(flags))]
    return FlagSet(actions=tuple(actions), flag_groups=tuple(flag_groups or ()))


def iterate(flags: Sequence[str], variable: str) -> FlagGroup:
    """Flag group repeated over ``variable``, skipped when it is empty."""
    return FlagGroup(
        flags=tuple(flags), iterate_over=variable, expand_if_available=variable
    )


def assemble_features() -> Tuple[Feature, ...]:
    """
    Build the toolchain's feature table.

    The result is the same on every call; whether a parameterized group
    produces flags depends only on the build variables at expansion time.

    Returns:
        Features in FEATURE_ORDER
    """
    return (
        Feature(
            name="default_compile_flags",
            flag_sets=(
                flag_set(ALL_COMPILE_ACTIONS, flags=DEFAULT_COMPILE_FLAGS),
                flag_set(ALL_CXX_COMPILE_ACTIONS, flags=DEFAULT_CXX_FLAGS),
            ),
        ),
        Feature(
            name="default_link_flags",
            flag_sets=(flag_set(ALL_LINK_ACTIONS, flags=DEFAULT_LINK_FLAGS),),
        ),
        Feature(
            name="user_compile_flags",
            flag_sets=(
                flag_set(
                    ALL_COMPILE_ACTIONS,
                    flag_groups=[
                        iterate(["%{user_compile_flags}"], "user_compile_flags")
                    ],
                ),
            ),
        ),
        Feature(
            name="user_link_flags",
            flag_sets=(
                flag_set(
                    ALL_LINK_ACTIONS,
                    flag_groups=[iterate(["%{user_link_flags}"], "user_link_flags")],
                ),
            ),
        ),
        Feature(
            name="preprocessor_defines",
            flag_sets=(
                flag_set(
                    ALL_COMPILE_ACTIONS,
                    flag_groups=[
                        iterate(["-D%{preprocessor_defines}"], "preprocessor_defines")
                    ],
                ),
            ),
        ),
        Feature(
            name="include_paths",
            flag_sets=(
                flag_set(
                    ALL_COMPILE_ACTIONS,
                    flag_groups=[iterate(["-include", "%{includes}"], "includes")],
                ),
                flag_set(
                    ALL_COMPILE_ACTIONS,
                    flag_groups=[
                        iterate(
                            ["-iquote", "%{quote_include_paths}"],
                            "quote_include_paths",
                        ),
                        iterate(["-I%{include_paths}"], "include_paths"),
                        iterate(
                            ["-isystem", "%{system_include_paths}"],
                            "system_include_paths",
                        ),
                    ],
                ),
            ),
        ),
        Feature(
            name="library_search_directories",
            flag_sets=(
                flag_set(
                    ALL_LINK_ACTIONS,
                    flag_groups=[
                        iterate(
                            ["-L%{library_search_directories}"],
                            "library_search_directories",
                        )
                    ],
                ),
            ),
        ),
        Feature(
            name="linkstamp_paths",
            flag_sets=(
                flag_set(
                    ALL_LINK_ACTIONS,
                    flag_groups=[iterate(["%{linkstamp_paths}"], "linkstamp_paths")],
                ),
            ),
        ),
    )


def expand_features(
    features: Sequence[Feature],
    action: str,
    variables: Optional[Mapping[str, Sequence[str]]] = None,
) -> List[str]:
    """
    Expand a feature table into the flags one action receives.

    Args:
        features: Feature table, usually from assemble_features()
        action: Action name (e.g., ACTION_NAMES.cpp_compile)
        variables: Build variables (e.g., {"include_paths": ["src"]})

    Returns:
        Flags in feature order

    Example:
        >>> expand_features(assemble_features(), ACTION_NAMES.c_compile, {"preprocessor_defines": ["A=1"]})[-1]
        '-DA=1'
    """
    variables = variables or {}
    flags: List[str] = []
    for feature in features:
        flags.extend(feature.expand(action, variables))
    return flags
