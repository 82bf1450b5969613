from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from imagemarker.marker.errors import EmptyHistory, NoImageLoaded
from imagemarker.marker.gesture import GestureMachine, PointerAction, PointerEvent
from imagemarker.marker.strokes import (
    Color,
    PointF,
    StrokeHistory,
    bake_strokes,
    draw_stroke,
    stroke_width_scale,
)
from imagemarker.marker.transform import ViewTransform

logger = logging.getLogger(__name__)

DEFAULT_STROKE_COLOR: Color = (255, 0, 0)
DEFAULT_STROKE_WIDTH = 3.0


class DrawingSurface:
    """Owns the current image, its view transform and the stroke history.

    The image is replaced on load and on bake, never drawn into, so any
    surface handed out by ``get_current_bitmap`` stays a stable snapshot.
    """

    def __init__(
        self,
        *,
        stroke_color: Color = DEFAULT_STROKE_COLOR,
        stroke_width: float = DEFAULT_STROKE_WIDTH,
    ) -> None:
        self.stroke_color = stroke_color
        self.stroke_width = float(stroke_width)
        self.transform = ViewTransform()
        self.history = StrokeHistory()
        self.gesture = GestureMachine(self.transform, self.history)
        self.image: Optional[pygame.Surface] = None
        self.needs_redraw = True
        self._scaled_cache: Dict[Tuple[int, Tuple[int, int]], pygame.Surface] = {}

    # --- image and viewport ---

    def set_viewport(self, width: int, height: int) -> None:
        if self.transform.set_viewport(width, height):
            self._scaled_cache.clear()
        self.needs_redraw = True

    def set_image(self, image: pygame.Surface) -> None:
        width, height = image.get_size()
        self.transform.set_image(width, height)
        self.image = image
        self.history.clear()
        self.gesture.reset()
        self._scaled_cache.clear()
        self.needs_redraw = True
        logger.info("Loaded image %dx%d", width, height)

    def pan(self, dx: float, dy: float) -> bool:
        if self.transform.pan(dx, dy):
            self.needs_redraw = True
            return True
        return False

    def has_image(self) -> bool:
        return self.image is not None

    def has_strokes(self) -> bool:
        return bool(self.history)

    def get_current_bitmap(self) -> Optional[pygame.Surface]:
        return self.image

    # --- input ---

    def handle_pointer(self, event: PointerEvent) -> bool:
        if self.image is None:
            return False
        # Releases must always reach the gesture so a stroke cannot outlive its touch.
        if not self.transform.ready and event.action in (PointerAction.DOWN, PointerAction.MOVE):
            return False
        changed = self.gesture.handle(event)
        if changed:
            self.needs_redraw = True
        return changed

    # --- history ---

    def undo(self) -> bool:
        if self.image is None:
            return False
        removed = self.history.undo()
        if removed:
            self.needs_redraw = True
        return removed

    def clear(self) -> bool:
        if self.image is None:
            return False
        self.history.clear()
        self.needs_redraw = True
        return True

    def native_stroke_width(self) -> float:
        return self.stroke_width * stroke_width_scale(self.transform.scale)

    def bake(self) -> pygame.Surface:
        """Composite every finished stroke into a new current image.

        Raises NoImageLoaded, EmptyHistory or RasterAllocationFailure. On any
        failure the image and history are left as they were.
        """
        if self.image is None:
            raise NoImageLoaded("no image loaded")
        if not self.history:
            raise EmptyHistory("nothing to bake")
        baked = bake_strokes(self.image, self.history, self.stroke_color, self.native_stroke_width())
        count = len(self.history)
        self.image = baked
        self.history.clear()
        self._scaled_cache.clear()
        self.needs_redraw = True
        logger.info("Baked %d strokes into %dx%d image", count, *baked.get_size())
        return baked

    def annotated_snapshot(self) -> Optional[pygame.Surface]:
        """Image plus pending strokes at native size, without changing state."""
        if self.image is None:
            return None
        return bake_strokes(self.image, self.history, self.stroke_color, self.native_stroke_width())

    # --- rendering ---

    def _scaled_image(self) -> Optional[pygame.Surface]:
        if self.image is None:
            return None
        scaled_w, scaled_h = self.transform.scaled_size
        size = (max(1, int(round(scaled_w))), max(1, int(round(scaled_h))))
        key = (id(self.image), size)
        cached = self._scaled_cache.get(key)
        if cached is None:
            self._scaled_cache.clear()
            if self.image.get_bitsize() in (24, 32):
                cached = pygame.transform.smoothscale(self.image, size)
            else:
                cached = pygame.transform.scale(self.image, size)
            self._scaled_cache[key] = cached
        return cached

    def _screen_points(self, points: Sequence[PointF]) -> List[PointF]:
        return [self.transform.to_screen_space(x, y) for x, y in points]

    def render(self, target: pygame.Surface) -> None:
        """Draw image and strokes onto ``target``, whose origin is the viewport's."""
        if self.image is None or not self.transform.ready:
            self.needs_redraw = False
            return
        scaled = self._scaled_image()
        origin = (int(round(self.transform.translate_x)), int(round(self.transform.translate_y)))
        target.blit(scaled, origin)

        strokes = [stroke.points for stroke in self.history]
        in_progress = self.gesture.in_progress
        if in_progress is not None:
            strokes.append(in_progress.points)
        for points in strokes:
            draw_stroke(target, self._screen_points(points), self.stroke_color, self.stroke_width)
        self.needs_redraw = False
