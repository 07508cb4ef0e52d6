from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "~/.local/share/pixelbox",
    "editor": {
        "scale": 10,
        "sizes": ["30x30", "60x60", "90x90"],
        "size": "30x30",
        "tool": "draw",
        "color": "#000000",
        "background": "#f0f0f0",
        "max_import_cells": 100,
        "palette": [
            [0, 0, 0],
            [255, 255, 255],
            [220, 20, 60],
            [255, 127, 0],
            [255, 215, 0],
            [34, 139, 34],
            [0, 128, 128],
            [30, 144, 255],
            [138, 43, 226],
            [255, 105, 180],
            [210, 105, 30],
            [105, 105, 105],
        ],
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    paths = []
    env_path = os.environ.get("PIXELBOX_CONFIG")
    if env_path:
        paths.append(Path(env_path).expanduser())
    paths.append(Path("config.yaml"))
    xdg_home = os.environ.get("XDG_CONFIG_HOME") or "~/.config"
    paths.append(Path(xdg_home).expanduser() / "pixelbox" / "config.yaml")
    return paths


def _read_overrides(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", path)
        return {}
    return data


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Defaults overlaid with the first config file found.

    An explicit ``path`` skips the search; a missing one yields the defaults.
    """
    candidates = [path] if path is not None else _candidate_config_paths()
    source = next((candidate for candidate in candidates if candidate.is_file()), None)
    if source is None:
        return _deep_merge(DEFAULT_CONFIG, {})
    logger.debug("Loading config overrides from %s", source)
    return _deep_merge(DEFAULT_CONFIG, _read_overrides(source))


def editor_config(config: Dict[str, Any]) -> Dict[str, Any]:
    section = config.get("editor", {})
    if not isinstance(section, dict):
        return dict(DEFAULT_CONFIG["editor"])
    return _deep_merge(DEFAULT_CONFIG["editor"], section)


def _coerce_scale(value: object, default: int) -> int:
    try:
        scale = int(value)
    except (TypeError, ValueError):
        return default
    return scale if scale > 0 else default


def _coerce_size_label(value: object, sizes: list[str], default: str) -> str:
    label = str(value)
    if label in sizes:
        return label
    return sizes[0] if sizes else default
