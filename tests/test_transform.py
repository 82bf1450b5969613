import pytest

from imagemarker.marker.transform import ViewTransform, clamp_axis


def _transform(image, viewport):
    transform = ViewTransform()
    transform.set_viewport(*viewport)
    transform.set_image(*image)
    return transform


def _covers_or_centered(translate, scaled, viewport):
    if scaled <= viewport:
        return translate == pytest.approx((viewport - scaled) / 2)
    return viewport - scaled - 1e-9 <= translate <= 1e-9


@pytest.mark.parametrize(
    "image, viewport",
    [
        ((1000, 2000), (500, 800)),
        ((4000, 3000), (1080, 1920)),
        ((100, 50), (400, 800)),
        ((333, 777), (1366, 700)),
    ],
)
def test_scale_fits_viewport_width_and_bounds_hold(image, viewport):
    transform = _transform(image, viewport)
    assert transform.scale == viewport[0] / image[0]
    scaled_w, scaled_h = transform.scaled_size
    assert _covers_or_centered(transform.translate_x, scaled_w, viewport[0])
    assert _covers_or_centered(transform.translate_y, scaled_h, viewport[1])

    transform.pan(-10_000, -10_000)
    assert _covers_or_centered(transform.translate_x, scaled_w, viewport[0])
    assert _covers_or_centered(transform.translate_y, scaled_h, viewport[1])
    transform.pan(20_000, 20_000)
    assert _covers_or_centered(transform.translate_x, scaled_w, viewport[0])
    assert _covers_or_centered(transform.translate_y, scaled_h, viewport[1])


def test_short_image_is_centered_vertically():
    transform = _transform((100, 50), (400, 800))
    assert transform.scale == 4.0
    assert transform.translate_y == 300.0
    assert transform.pan(0, 120) is True
    assert transform.translate_y == 300.0


def test_round_trip_within_image():
    transform = _transform((1000, 2000), (500, 800))
    transform.pan(0, -137)
    for point in [(0.0, 0.0), (999.0, 1999.0), (123.4, 567.8), (500.0, 1000.0)]:
        screen = transform.to_screen_space(*point)
        back = transform.to_image_space(*screen)
        assert back == pytest.approx(point)


def test_viewport_zero_defers_recompute():
    transform = ViewTransform()
    transform.set_image(1000, 2000)
    assert not transform.ready
    assert transform.set_viewport(0, 0) is False
    assert not transform.ready
    assert transform.pan(0, -50) is False

    assert transform.set_viewport(500, 800) is True
    assert transform.ready
    assert transform.scale == 0.5


def test_screen_to_image_scenario():
    transform = _transform((1000, 2000), (500, 800))
    assert transform.scale == 0.5
    assert transform.to_image_space(100, 100) == pytest.approx((200, 200))
    assert transform.to_image_space(100, 300) == pytest.approx((200, 600))

    transform.pan(0, -50)
    assert transform.to_screen_space(200, 200) == pytest.approx((100, 50))


def test_pan_clamps_to_far_edge():
    transform = _transform((1000, 2000), (500, 800))
    transform.pan(0, -5000)
    assert transform.translate_y == -200.0
    transform.pan(0, 5000)
    assert transform.translate_y == 0.0


def test_horizontal_clamp_range():
    assert clamp_axis(-900, 1000, 500) == -500
    assert clamp_axis(250, 1000, 500) == 0
    assert clamp_axis(-120, 1000, 500) == -120
    assert clamp_axis(-120, 400, 500) == 50


def test_horizontal_pan_has_no_effect_when_width_fits():
    transform = _transform((1000, 2000), (500, 800))
    transform.pan(1000, 0)
    assert transform.translate_x == 0.0


def test_resize_resets_translation():
    transform = _transform((1000, 2000), (500, 800))
    transform.pan(0, -100)
    transform.set_viewport(250, 400)
    assert transform.scale == 0.25
    assert transform.translate_y == 0.0


def test_invalid_image_size_rejected():
    transform = ViewTransform()
    with pytest.raises(ValueError):
        transform.set_image(0, 10)
