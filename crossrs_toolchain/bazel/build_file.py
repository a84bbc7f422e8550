"""
BUILD file generation for the cross-rs toolchain repository.

This module renders a resolved toolchain into the ``BUILD.bazel`` of the
generated repository: a ``cross_rs_toolchain_config`` target carrying the tool
paths, a ``cc_toolchain`` and a ``toolchain`` registration with the platform
constraints. A stub resolution renders a toolchain whose constraints can never
match.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Union

from ..core.filesystem import atomic_write
from ..core.locking import output_lock
from ..toolchain.descriptor import Resolution, StubDescriptor, ToolchainDescriptor

logger = logging.getLogger(__name__)

BUILD_FILE_NAME = "BUILD.bazel"
DEFAULT_RULES_LABEL = "@rules_cross_rs//:rules.bzl"
CC_TOOLCHAIN_TYPE = "@bazel_tools//tools/cpp:toolchain_type"


def starlark_string(value: str) -> str:
    """Quote a string for Starlark."""
    return json.dumps(value)


def starlark_list(values: Iterable[str], indent: int = 4) -> str:
    """
    Render a list of strings as a multi-line Starlark list.

    Example:
        >>> print(starlark_list(["a"], indent=4))
        [
            "a",
        ]
    """
    values = list(values)
    if not values:
        return "[]"
    pad = " " * (indent + 4)
    items = "".join(f"{pad}{starlark_string(v)},\n" for v in values)
    return "[\n" + items + " " * indent + "]"


def _header(resolution: Resolution) -> List[str]:
    return [
        "# Generated by crossrs-toolchain. Do not edit.",
        f"# Environment fingerprint: {resolution.fingerprint}",
        "",
    ]


def render_toolchain(descriptor: ToolchainDescriptor, rules_label: str) -> str:
    """
    Render the BUILD file for a resolved toolchain.

    Args:
        descriptor: Resolved toolchain
        rules_label: Label of the .bzl file defining cross_rs_toolchain_config

    Returns:
        BUILD file content
    """
    tool_paths = dict(descriptor.tools.tool_paths())
    # gcc, g++, ar, ... attribute names; cpp is wired to g++ by the rule itself
    tool_attrs = [
        (name.replace("+", "x") + "_path", path)
        for name, path in tool_paths.items()
        if name != "cpp"
    ]

    lines = _header(descriptor)
    lines += [
        f"load({starlark_string(rules_label)}, \"cross_rs_toolchain_config\")",
        'load("@rules_cc//cc:defs.bzl", "cc_toolchain")',
        "",
        'package(default_visibility = ["//visibility:public"])',
        "",
        "cross_rs_toolchain_config(",
        '    name = "toolchain_config",',
        f"    target_triple = {starlark_string(descriptor.triple.value)},",
    ]
    for attr, path in tool_attrs:
        lines.append(f"    {attr} = {starlark_string(path)},")
    lines += [
        "    builtin_include_directories = "
        f"{starlark_list(descriptor.builtin_include_directories)},",
        ")",
        "",
        "cc_toolchain(",
        '    name = "toolchain",',
        f"    toolchain_identifier = {starlark_string(descriptor.toolchain_identifier)},",
        '    toolchain_config = ":toolchain_config",',
        '    all_files = ":empty",',
        '    compiler_files = ":empty",',
        '    linker_files = ":empty",',
        '    dwp_files = ":empty",',
        '    objcopy_files = ":empty",',
        '    strip_files = ":empty",',
        "    supports_param_files = 1,",
        ")",
        "",
        'filegroup(name = "empty")',
        "",
        "toolchain(",
        '    name = "toolchain_definition",',
        '    toolchain = ":toolchain",',
        f"    toolchain_type = {starlark_string(CC_TOOLCHAIN_TYPE)},",
        f"    exec_compatible_with = {starlark_list(descriptor.exec_compatible_with)},",
        "    target_compatible_with = "
        f"{starlark_list(descriptor.target_compatible_with)},",
        ")",
    ]
    return "\n".join(lines) + "\n"


def render_stub(stub: StubDescriptor) -> str:
    """
    Render the BUILD file for a stub resolution.

    The toolchain is registered with impossible constraints so
    ``register_toolchains`` succeeds but the toolchain is never selected.
    """
    lines = _header(stub)
    lines += [
        f"# Stub toolchain: {stub.reason}" if stub.reason else "# Stub toolchain",
        "# An empty CROSS_TOOLCHAIN_PREFIX is valid and means native compilation.",
        "",
        'package(default_visibility = ["//visibility:public"])',
        "",
        'filegroup(name = "empty")',
        "",
        "toolchain(",
        '    name = "toolchain_definition",',
        '    toolchain = ":empty",',
        f"    toolchain_type = {starlark_string(CC_TOOLCHAIN_TYPE)},",
        f"    exec_compatible_with = {starlark_list(stub.exec_compatible_with)},",
        f"    target_compatible_with = {starlark_list(stub.target_compatible_with)},",
        ")",
    ]
    return "\n".join(lines) + "\n"


def render_build_file(
    resolution: Resolution, rules_label: str = DEFAULT_RULES_LABEL
) -> str:
    """
    Render the BUILD file for either resolution variant.

    Args:
        resolution: ToolchainDescriptor or StubDescriptor
        rules_label: Label of the .bzl file defining cross_rs_toolchain_config

    Returns:
        BUILD file content
    """
    if resolution.is_stub:
        return render_stub(resolution)
    return render_toolchain(resolution, rules_label)


def write_build_file(
    resolution: Resolution,
    output_dir: Union[str, Path],
    rules_label: str = DEFAULT_RULES_LABEL,
    timeout: float = 30,
) -> Path:
    """
    Write ``BUILD.bazel`` for a resolution.

    The file is written atomically while holding a lock next to it.

    Args:
        resolution: ToolchainDescriptor or StubDescriptor
        output_dir: Repository directory
        rules_label: Label of the .bzl file defining cross_rs_toolchain_config
        timeout: Seconds to wait for the lock

    Returns:
        Path of the written file

    Raises:
        BuildFileLockTimeout: If the lock cannot be acquired in time
    """
    build_file = Path(output_dir) / BUILD_FILE_NAME
    content = render_build_file(resolution, rules_label)

    with output_lock(build_file, timeout=timeout):
        atomic_write(build_file, content)

    kind = "stub" if resolution.is_stub else "toolchain"
    logger.info(f"Wrote {kind} {BUILD_FILE_NAME} to {build_file}")
    return build_file
