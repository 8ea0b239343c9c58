"""Plugin settings file loading.

A plugin's YAML file overrides the environment-derived defaults. Only
known keys are accepted so a typo does not silently fall back to a
default.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from hashtags import PAGE_SIZE_OPTIONS

logger = logging.getLogger(__name__)

PLUGIN_CONFIG_KEYS = frozenset({
    "base_url",
    "plugin_id",
    "token",
    "http_timeout",
    "page_size",
    "team_name",
    "preferences_path",
})


def load_plugin_config(path: str | Path) -> dict[str, Any]:
    """Load a plugin's settings YAML.

    Returns:
        Parsed dict. Empty dict if the file exists but is empty.

    Raises:
        FileNotFoundError: If the file does not exist.
        TypeError: If the root is not a mapping.
        ValueError: If the file contains unknown keys or an unsupported
            ``page_size``.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Plugin config not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(
            f"Plugin config must be a YAML mapping, "
            f"got {type(data).__name__}: {path}"
        )

    unknown = sorted(set(data) - PLUGIN_CONFIG_KEYS)
    if unknown:
        raise ValueError(f"Unknown plugin config keys in {path}: {unknown}")

    page_size = data.get("page_size")
    if page_size is not None and page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(
            f"Unsupported page_size {page_size!r} in {path}, "
            f"expected one of {PAGE_SIZE_OPTIONS}"
        )
    return data


def merge_plugin_config(
    defaults: dict[str, Any], overrides: dict[str, Any]
) -> dict[str, Any]:
    """Overlay file settings on defaults; ``None`` values keep the default."""
    merged = dict(defaults)
    for key, value in overrides.items():
        if value is None:
            logger.debug("Plugin config key %s is null, keeping default", key)
            continue
        merged[key] = value
    return merged
