"""
Pytest configuration and shared fixtures for crossrs-toolchain tests.
"""

import pytest
from typing import Dict, List, Optional, Sequence

from crossrs_toolchain.core.interfaces import (
    ExecutableFinder,
    ProcessResult,
    ProcessRunner,
)


GCC_SEARCH_LIST = """\
Using built-in specs.
COLLECT_GCC=aarch64-linux-gnu-g++
Target: aarch64-linux-gnu
ignoring nonexistent directory "/usr/local/include/aarch64-linux-gnu"
#include "..." search starts here:
#include <...> search starts here:
 /usr/aarch64-linux-gnu/include/c++/12
 /usr/lib/gcc-cross/aarch64-linux-gnu/12/include
End of search list.
COMPILER_PATH=/usr/lib/gcc-cross/aarch64-linux-gnu/12/
"""


class FakeFinder(ExecutableFinder):
    """Executable finder backed by a name -> path dictionary."""

    def __init__(self, tools: Optional[Dict[str, str]] = None):
        self.tools = dict(tools or {})
        self.lookups: List[str] = []

    def which(self, name: str) -> Optional[str]:
        self.lookups.append(name)
        return self.tools.get(name)


class FakeRunner(ProcessRunner):
    """Process runner returning a canned result or raising a canned error."""

    def __init__(
        self,
        result: Optional[ProcessResult] = None,
        error: Optional[BaseException] = None,
    ):
        self.result = result or ProcessResult(returncode=0)
        self.error = error
        self.calls: List[Sequence[str]] = []
        self.timeouts: List[float] = []

    def run(self, args: Sequence[str], timeout: float) -> ProcessResult:
        self.calls.append(list(args))
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return self.result


def cross_tools(prefix: str, names: Sequence[str], bindir: str = "/usr/bin") -> Dict[str, str]:
    """Build a FakeFinder table for prefixed tool names."""
    return {f"{prefix}{name}": f"{bindir}/{prefix}{name}" for name in names}


@pytest.fixture
def aarch64_finder() -> FakeFinder:
    """Finder with only the mandatory aarch64 cross tools."""
    return FakeFinder(cross_tools("aarch64-linux-gnu-", ["gcc", "g++", "ar", "ld"]))


@pytest.fixture
def gcc_runner() -> FakeRunner:
    """Runner that prints a GCC include search list on stderr."""
    return FakeRunner(ProcessResult(returncode=0, stderr=GCC_SEARCH_LIST))


@pytest.fixture
def cross_environ() -> Dict[str, str]:
    """Environment of a cross-rs aarch64 container."""
    return {
        "TARGET": "aarch64-unknown-linux-gnu",
        "CROSS_TOOLCHAIN_PREFIX": "aarch64-linux-gnu-",
        "CROSS_TOOLCHAIN_SUFFIX": "",
        "PATH": "/usr/local/bin:/usr/bin",
    }


@pytest.fixture
def make_finder():
    """Factory for FakeFinder instances."""
    return FakeFinder


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner


@pytest.fixture
def aarch64_descriptor(cross_environ, aarch64_finder, gcc_runner):
    """Resolved descriptor for the aarch64 cross environment."""
    from crossrs_toolchain.toolchain.descriptor import resolve_toolchain

    return resolve_toolchain(cross_environ, finder=aarch64_finder, runner=gcc_runner)
