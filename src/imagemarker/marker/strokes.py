from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Tuple

import pygame

from imagemarker.marker.errors import RasterAllocationFailure

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]
PointF = Tuple[float, float]


@dataclass
class Stroke:
    points: List[PointF] = field(default_factory=list)
    finished: bool = False

    def append(self, point: PointF) -> None:
        if self.finished:
            raise RuntimeError("cannot extend a finished stroke")
        self.points.append((float(point[0]), float(point[1])))

    def finish(self) -> "Stroke":
        self.finished = True
        return self


class StrokeHistory:
    def __init__(self) -> None:
        self._strokes: List[Stroke] = []

    def append(self, stroke: Stroke) -> None:
        self._strokes.append(stroke.finish())

    def undo(self) -> bool:
        if not self._strokes:
            return False
        self._strokes.pop()
        return True

    def clear(self) -> None:
        self._strokes.clear()

    def __len__(self) -> int:
        return len(self._strokes)

    def __bool__(self) -> bool:
        return bool(self._strokes)

    def __iter__(self) -> Iterator[Stroke]:
        return iter(self._strokes)


def _to_int(point: PointF) -> Tuple[int, int]:
    return (int(round(point[0])), int(round(point[1])))


def draw_stroke(
    surface: pygame.Surface,
    points: Sequence[PointF],
    color: Color,
    width: float,
) -> None:
    if not points:
        return
    # Discs and segment quads share one integer half-width.
    radius = max(1, int(math.ceil(width * 0.5 - 0.5)))

    # Round caps and joins: a disc at every vertex.
    for point in points:
        pygame.draw.circle(surface, color, _to_int(point), radius)

    for start, end in zip(points, points[1:]):
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        length = math.hypot(dx, dy)
        if length < 1e-6:
            continue
        nx = -dy / length * radius
        ny = dx / length * radius
        quad = [
            (start[0] + nx, start[1] + ny),
            (start[0] - nx, start[1] - ny),
            (end[0] - nx, end[1] - ny),
            (end[0] + nx, end[1] + ny),
        ]
        pygame.draw.polygon(surface, color, [_to_int(p) for p in quad])


def stroke_width_scale(transform_scale: float) -> float:
    """Factor turning a screen-space stroke width into image pixels."""
    if transform_scale <= 0:
        raise ValueError("transform scale must be positive")
    return 1.0 / transform_scale


def bake_strokes(
    image: pygame.Surface,
    strokes: Iterable[Stroke],
    color: Color,
    width: float,
) -> pygame.Surface:
    """Return a copy of ``image`` with ``strokes`` rasterized at ``width``.

    ``image`` itself is left untouched. Failing to allocate the copy raises
    RasterAllocationFailure.
    """
    try:
        baked = image.copy()
    except (pygame.error, MemoryError) as exc:
        raise RasterAllocationFailure(
            f"cannot allocate {image.get_width()}x{image.get_height()} bake buffer"
        ) from exc

    count = 0
    for stroke in strokes:
        draw_stroke(baked, stroke.points, color, width)
        count += 1
    logger.debug("Rasterized %d strokes at width %.2f", count, width)
    return baked
