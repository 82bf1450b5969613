"""Screen <-> image coordinate mapping for the drawing surface.

The image is always scaled to fit the viewport width. Only translation is
user controlled (two-finger pan) and it is clamped so the image either covers
the viewport or sits centered inside it on each axis.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

Vec = Tuple[float, float]


def clamp_axis(translate: float, scaled: float, viewport: float) -> float:
    if scaled <= viewport:
        return (viewport - scaled) / 2.0
    # Far edge may not retreat past the near edge of the viewport.
    return max(viewport - scaled, min(0.0, translate))


class ViewTransform:
    def __init__(self) -> None:
        self.viewport_width = 0
        self.viewport_height = 0
        self.image_size: Optional[Tuple[int, int]] = None
        self.scale = 1.0
        self.translate_x = 0.0
        self.translate_y = 0.0
        self._inverse: Tuple[float, float, float] = (1.0, 0.0, 0.0)
        self._dirty = False

    @property
    def ready(self) -> bool:
        return self.image_size is not None and not self._dirty and self._has_viewport()

    @property
    def scaled_size(self) -> Vec:
        if self.image_size is None:
            return (0.0, 0.0)
        return (self.image_size[0] * self.scale, self.image_size[1] * self.scale)

    def _has_viewport(self) -> bool:
        return self.viewport_width > 0 and self.viewport_height > 0

    def set_viewport(self, width: int, height: int) -> bool:
        self.viewport_width = int(width)
        self.viewport_height = int(height)
        if not self._has_viewport():
            logger.debug("Viewport %sx%s not laid out yet, deferring", width, height)
            return False
        if self.image_size is None:
            return False
        self._reset()
        return True

    def set_image(self, image_width: int, image_height: int) -> None:
        if image_width <= 0 or image_height <= 0:
            raise ValueError(f"invalid image size {image_width}x{image_height}")
        self.image_size = (int(image_width), int(image_height))
        self._dirty = True
        if self._has_viewport():
            self._reset()

    def clear_image(self) -> None:
        self.image_size = None
        self._dirty = False

    def pan(self, dx: float, dy: float) -> bool:
        if not self.ready:
            return False
        self.translate_x += dx
        self.translate_y += dy
        self._clamp()
        self._update_inverse()
        return True

    def to_image_space(self, x: float, y: float) -> Vec:
        inv_scale, inv_tx, inv_ty = self._inverse
        return (x * inv_scale + inv_tx, y * inv_scale + inv_ty)

    def to_screen_space(self, x: float, y: float) -> Vec:
        return (x * self.scale + self.translate_x, y * self.scale + self.translate_y)

    def _reset(self) -> None:
        assert self.image_size is not None
        self.scale = self.viewport_width / self.image_size[0]
        self.translate_x = 0.0
        self.translate_y = 0.0
        self._clamp()
        self._update_inverse()
        self._dirty = False
        logger.debug(
            "Transform reset: scale=%.4f translate=(%.1f, %.1f)",
            self.scale,
            self.translate_x,
            self.translate_y,
        )

    def _clamp(self) -> None:
        scaled_w, scaled_h = self.scaled_size
        self.translate_x = clamp_axis(self.translate_x, scaled_w, self.viewport_width)
        self.translate_y = clamp_axis(self.translate_y, scaled_h, self.viewport_height)

    def _update_inverse(self) -> None:
        inv_scale = 1.0 / self.scale
        self._inverse = (inv_scale, -self.translate_x * inv_scale, -self.translate_y * inv_scale)
