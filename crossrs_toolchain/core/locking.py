"""
Write locking for generated files.

Several build steps can configure the same output directory at once (for
example a repository rule re-run while an IDE sync is in progress). The lock
here serializes writers so a BUILD file is always produced by exactly one
process at a time.

Usage:
    from crossrs_toolchain.core.locking import output_lock

    with output_lock(output_dir / "BUILD.bazel", timeout=30):
        atomic_write(output_dir / "BUILD.bazel", content)
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from .exceptions import BuildFileLockTimeout

logger = logging.getLogger(__name__)


def lock_path_for(target: Path) -> Path:
    """
    Get the lock file used to guard ``target``.

    Args:
        target: File being written

    Returns:
        Sibling path with a ``.lock`` suffix appended
    """
    return target.with_name(f".{target.name}.lock")


@contextmanager
def output_lock(target: Path, timeout: float = 30):
    """
    Acquire the lock guarding a generated file.

    Args:
        target: File that will be written while the lock is held
        timeout: Maximum wait time in seconds (default: 30)

    Yields:
        None

    Raises:
        BuildFileLockTimeout: If lock can't be acquired within timeout
    """
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    lock_path = lock_path_for(target)
    lock = FileLock(str(lock_path), timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired output lock: {lock_path}")
            yield
            logger.debug(f"Released output lock: {lock_path}")
    except LockTimeout as e:
        logger.error(
            f"Could not acquire lock for {target} after {timeout}s. "
            "Another generator process may be running."
        )
        raise BuildFileLockTimeout(
            f"Could not acquire lock for {target} after {timeout}s"
        ) from e
