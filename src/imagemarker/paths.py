from __future__ import annotations

from pathlib import Path
from typing import Dict, Any


def get_data_root(config: Dict[str, Any]) -> Path:
    root = config.get("data_root") or "~/.local/share/imagemarker"
    return Path(root).expanduser().resolve()


def ensure_directories(data_root: Path) -> Dict[str, Path]:
    library_dir = data_root / "library"
    logs_dir = data_root / "logs"

    library_dir.mkdir(parents=True, exist_ok=True)
    logs_dir.mkdir(parents=True, exist_ok=True)

    return {
        "library": library_dir,
        "logs": logs_dir,
    }


def get_library_dir(config: Dict[str, Any], dirs: Dict[str, Path]) -> Path:
    # An explicit library_dir points at an existing photo folder and is never created.
    override = config.get("library_dir")
    if override:
        return Path(override).expanduser().resolve()
    return dirs["library"]
