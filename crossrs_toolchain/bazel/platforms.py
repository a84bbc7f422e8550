"""
Platform definitions for cross-rs targets.

Renders one Bazel ``platform`` per target triple so builds can select the
cross toolchain with ``--platforms=//:<triple>``. Triples come from the
command line or from a YAML file:

    targets:
      - aarch64-unknown-linux-gnu
      - armv7-linux-androideabi
"""

import logging
from pathlib import Path
from typing import Iterable, List

import yaml

from ..core.exceptions import ConfigError
from ..cross.targets import classify
from .build_file import starlark_list, starlark_string

logger = logging.getLogger(__name__)


def platform_definition(triple: str) -> str:
    """
    Render a single platform definition.

    Args:
        triple: Target triple, also used as the platform name

    Returns:
        Starlark ``platform(...)`` call

    Raises:
        InvalidTripleError: If the triple is malformed
    """
    constraint = classify(triple)
    return "\n".join(
        [
            "platform(",
            f"    name = {starlark_string(triple)},",
            f"    constraint_values = {starlark_list(constraint.labels())},",
            ")",
        ]
    )


def platform_definitions(triples: Iterable[str]) -> str:
    """
    Render platform definitions for several triples, in the given order.

    Duplicate triples are rendered once.

    Args:
        triples: Target triples

    Returns:
        Starlark source with one platform per triple
    """
    seen = set()
    blocks = []
    for triple in triples:
        if triple in seen:
            logger.debug(f"Skipping duplicate target {triple}")
            continue
        seen.add(triple)
        blocks.append(platform_definition(triple))
    return "\n\n".join(blocks) + ("\n" if blocks else "")


def load_target_list(path: Path) -> List[str]:
    """
    Load target triples from a YAML file.

    Args:
        path: YAML file with a top-level ``targets`` list

    Returns:
        Target triples in file order

    Raises:
        ConfigError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Targets file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if not isinstance(data, dict) or "targets" not in data:
        raise ConfigError(f"Missing required field 'targets' in {path}")

    targets = data["targets"]
    if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
        raise ConfigError(f"'targets' in {path} must be a list of strings")

    logger.debug(f"Loaded {len(targets)} targets from {path}")
    return targets
