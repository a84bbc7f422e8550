"""
Shared utilities for CLI commands.

Provides output formatting and writing used across multiple CLI commands.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from crossrs_toolchain.core.filesystem import atomic_write

logger = logging.getLogger(__name__)


def format_data(data: Dict[str, Any], fmt: str = "yaml") -> str:
    """
    Serialize a dictionary for display.

    Args:
        data: Data to serialize
        fmt: 'yaml' or 'json'

    Returns:
        Serialized text ending with a newline

    Raises:
        ValueError: If the format is unknown
    """
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    raise ValueError(f"Unknown output format: {fmt}")


def write_output(content: str, output: Optional[Path] = None) -> None:
    """
    Write command output to a file, or to stdout when no file is given.

    Args:
        content: Text to write
        output: Destination file (optional)
    """
    if output is None:
        print(content, end="")
        return

    atomic_write(output, content)
    logger.info(f"Wrote {output}")
