"""Touch gesture state machine.

One finger draws, two fingers pan. A second finger landing mid-stroke drops
the partial stroke, and after a pan every finger must lift before drawing
can start again.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from imagemarker.marker.strokes import PointF, Stroke, StrokeHistory
from imagemarker.marker.transform import ViewTransform

logger = logging.getLogger(__name__)


class PointerAction(Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    CANCEL = "cancel"


@dataclass(frozen=True)
class PointerEvent:
    action: PointerAction
    # Screen positions of every contact still touching after this event.
    contacts: Tuple[PointF, ...] = ()


@dataclass
class Idle:
    pass


@dataclass
class Drawing:
    stroke: Stroke = field(default_factory=Stroke)


@dataclass
class Panning:
    anchor: PointF


GestureState = Union[Idle, Drawing, Panning]


def midpoint(a: PointF, b: PointF) -> PointF:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


class GestureMachine:
    def __init__(self, transform: ViewTransform, history: StrokeHistory) -> None:
        self.transform = transform
        self.history = history
        self.state: GestureState = Idle()

    @property
    def in_progress(self) -> Optional[Stroke]:
        if isinstance(self.state, Drawing):
            return self.state.stroke
        return None

    def reset(self) -> None:
        self.state = Idle()

    def _set_state(self, state: GestureState) -> None:
        logger.debug("Gesture %s -> %s", type(self.state).__name__, type(state).__name__)
        self.state = state

    def handle(self, event: PointerEvent) -> bool:
        """Apply one pointer event. Returns True when a redraw is needed."""
        contacts = event.contacts
        state = self.state

        if event.action is PointerAction.DOWN:
            if len(contacts) >= 2:
                dropped = isinstance(state, Drawing)
                if dropped:
                    logger.debug("Second contact down, discarding in-progress stroke")
                self._set_state(Panning(anchor=midpoint(contacts[0], contacts[1])))
                return dropped
            if isinstance(state, Idle) and len(contacts) == 1:
                stroke = Stroke()
                stroke.append(self.transform.to_image_space(*contacts[0]))
                self._set_state(Drawing(stroke))
                return True
            return False

        if event.action is PointerAction.MOVE:
            if isinstance(state, Drawing) and len(contacts) == 1:
                state.stroke.append(self.transform.to_image_space(*contacts[0]))
                return True
            if isinstance(state, Panning) and len(contacts) >= 2:
                center = midpoint(contacts[0], contacts[1])
                dx = center[0] - state.anchor[0]
                dy = center[1] - state.anchor[1]
                state.anchor = center
                return self.transform.pan(dx, dy)
            return False

        # UP or CANCEL
        if isinstance(state, Drawing):
            if event.action is PointerAction.CANCEL or not contacts:
                self.history.append(state.stroke)
                logger.debug("Committed stroke with %d points", len(state.stroke.points))
                self._set_state(Idle())
                return True
            return False
        if isinstance(state, Panning):
            if event.action is PointerAction.CANCEL or len(contacts) <= 1:
                # The remaining finger never resumes drawing.
                self._set_state(Idle())
            else:
                state.anchor = midpoint(contacts[0], contacts[1])
            return False
        return False
