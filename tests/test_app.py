import pygame

from imagemarker.marker.app import (
    MESSAGES,
    MarkerApp,
    _coerce_color,
    _coerce_width,
    clear_message,
    undo_message,
)
from imagemarker.marker.gesture import PointerAction, PointerEvent
from imagemarker.marker.surface import DrawingSurface


def _surface_with_stroke():
    surface = DrawingSurface()
    surface.set_viewport(100, 100)
    image = pygame.Surface((200, 200), pygame.SRCALPHA)
    image.fill((255, 255, 255))
    surface.set_image(image)
    surface.handle_pointer(PointerEvent(PointerAction.DOWN, ((10, 10),)))
    surface.handle_pointer(PointerEvent(PointerAction.MOVE, ((20, 20),)))
    surface.handle_pointer(PointerEvent(PointerAction.UP, ()))
    return surface


def _headless_app(tmp_path, surface, *, delete_original=False):
    app = MarkerApp.__new__(MarkerApp)
    app.surface = surface
    app.library_dir = tmp_path
    app.source_path = None
    app.delete_original = delete_original
    app.toast = None
    app.toast_until = 0.0
    app.toast_seconds = 1.0
    return app


def test_undo_and_clear_messages():
    assert undo_message(DrawingSurface()) == "no_image_loaded"
    assert clear_message(DrawingSurface()) == "no_image_loaded"

    surface = _surface_with_stroke()
    assert undo_message(surface) == "undo_done"
    assert undo_message(surface) == "nothing_to_undo"
    assert clear_message(surface) == "nothing_to_clear"

    surface = _surface_with_stroke()
    assert clear_message(surface) == "cleared"
    assert not surface.has_strokes()
    assert clear_message(surface) == "nothing_to_clear"
    assert MESSAGES["nothing_to_clear"]


def test_coerce_stroke_settings():
    assert _coerce_color([0, 300, -5], (1, 2, 3)) == (0, 255, 0)
    assert _coerce_color("red", (1, 2, 3)) == (1, 2, 3)
    assert _coerce_color(None, (1, 2, 3)) == (1, 2, 3)
    assert _coerce_width("4.5", 3.0) == 4.5
    assert _coerce_width(0, 3.0) == 3.0
    assert _coerce_width("wide", 3.0) == 3.0


def test_save_without_strokes_reports_no_annotations(tmp_path):
    surface = _surface_with_stroke()
    surface.clear()
    app = _headless_app(tmp_path, surface)
    app._save()
    assert app.toast == MESSAGES["no_annotations"]
    assert list(tmp_path.iterdir()) == []


def test_save_without_image_reports_no_image(tmp_path):
    app = _headless_app(tmp_path, DrawingSurface())
    app._save()
    assert app.toast == MESSAGES["no_image_loaded"]


def test_save_bakes_writes_and_replaces_source(tmp_path):
    original = tmp_path / "photo.jpg"
    original.write_bytes(b"x")
    surface = _surface_with_stroke()
    app = _headless_app(tmp_path, surface, delete_original=True)
    app.source_path = original

    app._save()

    assert app.toast == MESSAGES["save_success"]
    assert not surface.has_strokes()
    assert not original.exists()
    assert app.source_path.parent == tmp_path
    assert app.source_path.name.startswith("IMG_ANNOTATED_")
    assert app.source_path.exists()


def test_save_keeps_original_by_default(tmp_path):
    original = tmp_path / "photo.jpg"
    original.write_bytes(b"x")
    app = _headless_app(tmp_path, _surface_with_stroke())
    app.source_path = original

    app._save()
    assert original.exists()
    assert app.source_path != original


def test_save_failure_reports_save_failed(tmp_path, monkeypatch):
    def _boom(*_args, **_kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("imagemarker.marker.app.save_annotated", _boom)
    app = _headless_app(tmp_path, _surface_with_stroke())
    app._save()
    assert app.toast == MESSAGES["save_failed"]
