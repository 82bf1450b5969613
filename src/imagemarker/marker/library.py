"""Photo library access: the image source and sink around the drawing surface."""
from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import List, Optional

import pygame
from PIL import Image, ImageOps

from imagemarker.marker.errors import DecodeFailure

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"}
ANNOTATED_PREFIX = "IMG_ANNOTATED_"


def _is_image(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_SUFFIXES and not path.name.startswith(".")


def list_images(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []

    def sort_key(path: Path) -> tuple:
        try:
            mtime = path.stat().st_mtime
        except OSError:
            mtime = 0.0
        return (-mtime, path.name.lower())

    return sorted((path for path in directory.iterdir() if _is_image(path)), key=sort_key)


def latest_image(directory: Path) -> Optional[Path]:
    images = list_images(directory)
    return images[0] if images else None


def decode_image(path: Path) -> pygame.Surface:
    try:
        with Image.open(path) as opened:
            # Camera photos are often stored sideways with an EXIF rotation tag.
            upright = ImageOps.exif_transpose(opened)
            rgba = upright.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeFailure(f"cannot decode {path}: {exc}") from exc
    surface = pygame.image.frombuffer(rgba.tobytes(), rgba.size, "RGBA").copy()
    logger.debug("Decoded %s as %dx%d", path, *rgba.size)
    return surface


def annotated_name(now_ms: int) -> str:
    return f"{ANNOTATED_PREFIX}{now_ms}.png"


def _save_surface_atomic(surface: pygame.Surface, path: Path) -> None:
    # Keep a .png suffix so pygame writes a PNG-encoded file.
    tmp_path = path.with_name(f".{path.stem}.tmp{path.suffix}")
    try:
        pygame.image.save(surface, str(tmp_path))
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def save_annotated(surface: pygame.Surface, directory: Path, now_ms: Optional[int] = None) -> Path:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / annotated_name(stamp)
    counter = 1
    while path.exists():
        path = directory / f"{ANNOTATED_PREFIX}{stamp}_{counter}.png"
        counter += 1
    _save_surface_atomic(surface, path)
    logger.info("Saved annotated image to %s", path)
    return path


def delete_original(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Could not delete %s: %s", path, exc)
        return False
    logger.info("Deleted original %s", path)
    return True
