from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "~/.local/share/imagemarker",
    "library_dir": None,
    "marker": {
        "stroke_width": 3,
        "stroke_color": [255, 0, 0],
        "delete_original": False,
        "toast_seconds": 2.0,
        "fullscreen": True,
    },
    "logging": {
        "level": "INFO",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("IMAGEMARKER_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("/etc/imagemarker/config.yaml"),
    ])
    return paths


def load_config() -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config
