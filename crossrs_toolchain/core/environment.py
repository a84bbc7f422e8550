"""
Environment configuration for crossrs-toolchain.

Resolution is driven entirely by environment variables exported by a cross-rs
container. This module captures them once into an immutable snapshot so the
rest of the engine never reads ``os.environ`` directly.

Variables:
    TARGET: Target triple (e.g., 'aarch64-unknown-linux-gnu')
    CROSS_TOOLCHAIN_PREFIX: Tool name prefix (e.g., 'aarch64-linux-gnu-');
        an empty string is valid and means native tool names
    CROSS_TOOLCHAIN_SUFFIX: Tool name suffix (e.g., '-12'), usually empty
    CROSS_SYSROOT: Sysroot of the container toolchain (informational)
    PATH: Executable search path
"""

import hashlib
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

TARGET_VAR = "TARGET"
PREFIX_VAR = "CROSS_TOOLCHAIN_PREFIX"
SUFFIX_VAR = "CROSS_TOOLCHAIN_SUFFIX"
SYSROOT_VAR = "CROSS_SYSROOT"
PATH_VAR = "PATH"

# A change in any of these must re-trigger resolution
WATCHED_VARIABLES: Tuple[str, ...] = (
    TARGET_VAR,
    PREFIX_VAR,
    SUFFIX_VAR,
    SYSROOT_VAR,
    PATH_VAR,
)


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """
    Immutable view of the variables that drive resolution.

    ``target`` and ``prefix`` are None when the variable is unset, which is
    distinct from an empty string.

    Attributes:
        target: Target triple or None
        prefix: Tool name prefix or None
        suffix: Tool name suffix ('' when unset)
        path: Executable search path
        sysroot: Container sysroot or None
    """

    target: Optional[str] = None
    prefix: Optional[str] = None
    suffix: str = ""
    path: str = ""
    sysroot: Optional[str] = None

    @classmethod
    def from_environ(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "EnvironmentSnapshot":
        """
        Capture a snapshot from an environment mapping.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            EnvironmentSnapshot

        Example:
            >>> snap = EnvironmentSnapshot.from_environ({"TARGET": "x86_64-unknown-linux-gnu"})
            >>> snap.prefix is None
            True
        """
        if environ is None:
            environ = os.environ

        return cls(
            target=environ.get(TARGET_VAR),
            prefix=environ.get(PREFIX_VAR),
            suffix=environ.get(SUFFIX_VAR, ""),
            path=environ.get(PATH_VAR, ""),
            sysroot=environ.get(SYSROOT_VAR),
        )

    @property
    def is_active(self) -> bool:
        """True when both the target triple and the prefix are present."""
        return self.target is not None and self.prefix is not None

    def fingerprint(self) -> str:
        """
        Hash of the watched variables.

        Unset and empty variables hash differently, so switching between
        stub and native mode changes the fingerprint.

        Returns:
            Hex sha256 digest
        """
        values = {
            TARGET_VAR: self.target,
            PREFIX_VAR: self.prefix,
            SUFFIX_VAR: self.suffix,
            SYSROOT_VAR: self.sysroot,
            PATH_VAR: self.path,
        }
        digest = hashlib.sha256()
        for name in WATCHED_VARIABLES:
            value = values[name]
            digest.update(name.encode("utf-8"))
            digest.update(b"\0" if value is None else b"=" + value.encode("utf-8"))
            digest.update(b"\n")
        return digest.hexdigest()
