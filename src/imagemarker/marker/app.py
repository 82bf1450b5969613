from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, Optional, Tuple

import pygame

from imagemarker.config import load_config
from imagemarker.logging_config import setup_logging
from imagemarker.marker.errors import DecodeFailure, EmptyHistory, MarkerError, NoImageLoaded
from imagemarker.marker.input import ContactTracker
from imagemarker.marker.library import decode_image, delete_original, latest_image, save_annotated
from imagemarker.marker.surface import DrawingSurface
from imagemarker.paths import ensure_directories, get_data_root, get_library_dir
from imagemarker.ui.common import Button, create_window, draw_toast

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

MESSAGES: Dict[str, str] = {
    "no_image_loaded": "Open a photo first",
    "no_image_found": "No photos found",
    "decode_failed": "Could not open that photo",
    "undo_done": "Undone",
    "nothing_to_undo": "Nothing to undo",
    "cleared": "Cleared",
    "nothing_to_clear": "Nothing to clear",
    "no_annotations": "Draw something before saving",
    "save_success": "Saved",
    "save_failed": "Save failed",
}

WINDOW_EVENTS = {
    event
    for event in (
        getattr(pygame, "WINDOWFOCUSLOST", None),
        getattr(pygame, "WINDOWLEAVE", None),
    )
    if event is not None
}


def _coerce_color(value: object, default: Color) -> Color:
    try:
        red, green, blue = (max(0, min(255, int(part))) for part in value)  # type: ignore[union-attr]
    except (TypeError, ValueError):
        return default
    return (red, green, blue)


def _coerce_width(value: object, default: float) -> float:
    try:
        width = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return width if width > 0 else default


def undo_message(surface: DrawingSurface) -> str:
    if not surface.has_image():
        return "no_image_loaded"
    return "undo_done" if surface.undo() else "nothing_to_undo"


def clear_message(surface: DrawingSurface) -> str:
    if not surface.has_image():
        return "no_image_loaded"
    if not surface.has_strokes():
        return "nothing_to_clear"
    surface.clear()
    return "cleared"


class MarkerApp:
    def __init__(
        self,
        *,
        screen: Optional[pygame.Surface] = None,
        screen_rect: Optional[pygame.Rect] = None,
        clock: Optional[pygame.time.Clock] = None,
    ) -> None:
        self.config = load_config()
        self.data_root = get_data_root(self.config)
        dirs = ensure_directories(self.data_root)
        setup_logging(dirs["logs"], self.config.get("logging", {}).get("level", "INFO"))
        self.library_dir = get_library_dir(self.config, dirs)

        marker_config = self.config.get("marker", {})
        self.delete_original = bool(marker_config.get("delete_original", False))
        self.toast_seconds = float(marker_config.get("toast_seconds", 2.0))

        if screen is None:
            self.screen, self.screen_rect = create_window(fullscreen=bool(marker_config.get("fullscreen", True)))
        else:
            self.screen = screen
            self.screen_rect = screen_rect or screen.get_rect()
        self.clock = clock or pygame.time.Clock()

        self.surface = DrawingSurface(
            stroke_color=_coerce_color(marker_config.get("stroke_color"), (255, 0, 0)),
            stroke_width=_coerce_width(marker_config.get("stroke_width"), 3.0),
        )
        self.font = pygame.font.SysFont("sans", 20)
        self.source_path: Optional[Path] = None
        self.toast: Optional[str] = None
        self.toast_until = 0.0

        self.buttons: Dict[str, Button] = {}
        self.canvas_rect = pygame.Rect(0, 0, 0, 0)
        self._layout()

    def _layout(self) -> None:
        bar_h = max(56, int(self.screen_rect.height * 0.08))
        self.canvas_rect = pygame.Rect(0, 0, self.screen_rect.width, self.screen_rect.height - bar_h)
        self.tracker = ContactTracker(self.canvas_rect, self.screen_rect.size)
        self.surface.set_viewport(self.canvas_rect.width, self.canvas_rect.height)

        pad = 10
        names = [("open", "Open"), ("undo", "Undo"), ("clear", "Clear"), ("save", "Save")]
        button_w = (self.screen_rect.width - pad * (len(names) + 1)) // len(names)
        self.buttons.clear()
        for idx, (key, label) in enumerate(names):
            rect = pygame.Rect(
                pad + idx * (button_w + pad),
                self.canvas_rect.bottom + pad,
                button_w,
                bar_h - 2 * pad,
            )
            self.buttons[key] = Button(rect=rect, label=label, fill=(245, 245, 245))

    def _show(self, key: str) -> None:
        self.toast = MESSAGES[key]
        self.toast_until = time.monotonic() + self.toast_seconds
        logger.debug("Toast: %s", self.toast)

    def _load_path(self, path: Path) -> bool:
        try:
            image = decode_image(path)
        except DecodeFailure as exc:
            logger.warning("%s", exc)
            self._show("decode_failed")
            return False
        self.surface.set_image(image)
        self.source_path = path
        return True

    def _open_latest(self) -> None:
        path = latest_image(self.library_dir)
        if path is None:
            self._show("no_image_found")
            return
        self._load_path(path)

    def _save(self) -> None:
        try:
            baked = self.surface.bake()
        except NoImageLoaded:
            self._show("no_image_loaded")
            return
        except EmptyHistory:
            self._show("no_annotations")
            return
        except MarkerError as exc:
            logger.error("Bake failed: %s", exc)
            self._show("save_failed")
            return

        directory = self.source_path.parent if self.source_path is not None else self.library_dir
        try:
            saved = save_annotated(baked, directory)
        except (pygame.error, OSError) as exc:
            logger.error("Saving annotated image failed: %s", exc)
            self._show("save_failed")
            return
        self._show("save_success")

        previous = self.source_path
        # The saved copy replaces the source so the next save supersedes it.
        self.source_path = saved
        if self.delete_original and previous is not None and previous != saved:
            delete_original(previous)

    def _handle_button(self, pos: Tuple[int, int]) -> bool:
        if self.buttons["open"].hit(pos):
            self._open_latest()
        elif self.buttons["undo"].hit(pos):
            self._show(undo_message(self.surface))
        elif self.buttons["clear"].hit(pos):
            self._show(clear_message(self.surface))
        elif self.buttons["save"].hit(pos):
            self._save()
        else:
            return False
        return True

    def _button_pos(self, event: pygame.event.Event) -> Optional[Tuple[int, int]]:
        finger_down = getattr(pygame, "FINGERDOWN", None)
        if finger_down is not None and event.type == finger_down:
            return (int(event.x * self.screen_rect.width), int(event.y * self.screen_rect.height))
        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", 1) == 1:
            if getattr(event, "touch", False):
                return None
            return event.pos
        return None

    def _cancel_contacts(self) -> None:
        pointer_event = self.tracker.cancel()
        if pointer_event is not None:
            self.surface.handle_pointer(pointer_event)

    def _resize(self, size: Tuple[int, int]) -> None:
        self._cancel_contacts()
        self.screen_rect = pygame.Rect((0, 0), size)
        self._layout()

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Dispatch one event. Returns False when the app should exit."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return False
        if event.type == pygame.VIDEORESIZE:
            self._resize(event.size)
            return True
        if event.type in WINDOW_EVENTS:
            self._cancel_contacts()
            return True

        pos = self._button_pos(event)
        if pos is not None and not self.canvas_rect.collidepoint(pos):
            self._handle_button(pos)
            return True

        pointer_event = self.tracker.handle(event)
        if pointer_event is not None:
            self.surface.handle_pointer(pointer_event)
        return True

    def _render(self) -> None:
        self.screen.fill((30, 30, 30))
        canvas = self.screen.subsurface(self.canvas_rect)
        if self.surface.has_image():
            self.surface.render(canvas)
        else:
            hint = self.font.render("Tap Open to load the latest photo", True, (220, 220, 220))
            self.screen.blit(hint, hint.get_rect(center=self.canvas_rect.center))

        pygame.draw.rect(
            self.screen,
            (238, 234, 226),
            pygame.Rect(0, self.canvas_rect.bottom, self.screen_rect.width, self.screen_rect.height - self.canvas_rect.bottom),
        )
        for key, button in self.buttons.items():
            if key in {"undo", "save"}:
                button.enabled = self.surface.has_strokes()
            elif key == "clear":
                button.enabled = self.surface.has_image()
            button.draw(self.screen, self.font)

        if self.toast and time.monotonic() < self.toast_until:
            draw_toast(self.screen, self.font, self.toast, self.canvas_rect.bottom - 24)
        pygame.display.flip()

    def run(self, *, quit_on_exit: bool = True) -> None:
        self._open_latest()
        running = True
        while running:
            for event in pygame.event.get():
                if not self.handle_event(event):
                    running = False
                    break
            self._render()
            self.clock.tick(60)

        if quit_on_exit:
            pygame.quit()


def main() -> None:
    try:
        MarkerApp().run(quit_on_exit=True)
    except Exception:
        logger.exception("ImageMarker crashed")
        pygame.quit()
        raise


if __name__ == "__main__":
    main()
