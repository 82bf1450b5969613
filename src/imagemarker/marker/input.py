"""Turns pygame touch and mouse events into PointerEvents.

Each event carries the positions of every contact still down, relative to
the drawing surface, in the order the contacts first touched.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

import pygame

from imagemarker.marker.gesture import PointerAction, PointerEvent
from imagemarker.marker.strokes import PointF

FINGERDOWN = getattr(pygame, "FINGERDOWN", None)
FINGERMOTION = getattr(pygame, "FINGERMOTION", None)
FINGERUP = getattr(pygame, "FINGERUP", None)

MOUSE_CONTACT_ID = -1

Point = Tuple[int, int]


def _is_emulated(event: pygame.event.Event) -> bool:
    # SDL mirrors touches as mouse events; the finger events are authoritative.
    return bool(getattr(event, "touch", False))


class ContactTracker:
    def __init__(self, canvas_rect: pygame.Rect, screen_size: Tuple[int, int]) -> None:
        self.canvas_rect = canvas_rect
        self.screen_size = screen_size
        self.contacts: Dict[int, PointF] = {}

    def _finger_pos(self, event: pygame.event.Event) -> PointF:
        return (
            event.x * self.screen_size[0] - self.canvas_rect.left,
            event.y * self.screen_size[1] - self.canvas_rect.top,
        )

    def _mouse_pos(self, event: pygame.event.Event) -> PointF:
        return (
            float(event.pos[0] - self.canvas_rect.left),
            float(event.pos[1] - self.canvas_rect.top),
        )

    def _emit(self, action: PointerAction) -> PointerEvent:
        return PointerEvent(action, tuple(self.contacts.values()))

    def _down(self, contact_id: int, pos: PointF, screen_pos: Point) -> Optional[PointerEvent]:
        if contact_id in self.contacts:
            return None
        if not self.canvas_rect.collidepoint(screen_pos):
            return None
        self.contacts[contact_id] = pos
        return self._emit(PointerAction.DOWN)

    def _move(self, contact_id: int, pos: PointF) -> Optional[PointerEvent]:
        if contact_id not in self.contacts:
            return None
        self.contacts[contact_id] = pos
        return self._emit(PointerAction.MOVE)

    def _up(self, contact_id: int) -> Optional[PointerEvent]:
        if self.contacts.pop(contact_id, None) is None:
            return None
        return self._emit(PointerAction.UP)

    def handle(self, event: pygame.event.Event) -> Optional[PointerEvent]:
        if FINGERDOWN is not None and event.type == FINGERDOWN:
            pos = self._finger_pos(event)
            screen_pos = (int(pos[0]) + self.canvas_rect.left, int(pos[1]) + self.canvas_rect.top)
            return self._down(event.finger_id, pos, screen_pos)
        if FINGERMOTION is not None and event.type == FINGERMOTION:
            return self._move(event.finger_id, self._finger_pos(event))
        if FINGERUP is not None and event.type == FINGERUP:
            return self._up(event.finger_id)

        if _is_emulated(event):
            return None
        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", 1) == 1:
            return self._down(MOUSE_CONTACT_ID, self._mouse_pos(event), event.pos)
        if event.type == pygame.MOUSEMOTION:
            return self._move(MOUSE_CONTACT_ID, self._mouse_pos(event))
        if event.type == pygame.MOUSEBUTTONUP and getattr(event, "button", 1) == 1:
            return self._up(MOUSE_CONTACT_ID)
        return None

    def cancel(self) -> Optional[PointerEvent]:
        if not self.contacts:
            return None
        self.contacts.clear()
        return PointerEvent(PointerAction.CANCEL, ())
