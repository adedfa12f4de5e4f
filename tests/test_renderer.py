"""
Viewport: 世界坐标 -> 屏幕像素
"""
import numpy as np
import pytest

from game.renderer import Viewport


@pytest.fixture
def viewport():
    return Viewport(1280, 720, fov=75.0, camera_distance=5.0)


class TestViewport:

    def test_origin_maps_to_screen_center(self, viewport):
        assert viewport.to_screen(0.0, 0.0) == (640, 360)

    def test_world_up_is_screen_up(self, viewport):
        _, y = viewport.to_screen(0.0, 1.0)
        assert y < 360

    def test_visible_half_height(self, viewport):
        expected = 5.0 * np.tan(np.radians(37.5))
        assert viewport.half_height == pytest.approx(expected)
        assert viewport.to_screen(0.0, expected) == (640, 0)

    def test_horizontal_extent_follows_aspect(self, viewport):
        assert viewport.half_width == pytest.approx(viewport.half_height * 1280 / 720)
        assert viewport.to_screen(viewport.half_width, 0.0) == (1280, 360)

    def test_resize_updates_aspect(self, viewport):
        """窗口变化后宽高比随之更新，竖直方向比例不变"""
        half_height = viewport.half_height
        viewport.resize(800, 800)
        assert viewport.aspect == pytest.approx(1.0)
        assert viewport.half_width == pytest.approx(half_height)
        assert viewport.to_screen(0.0, 0.0) == (400, 400)

    def test_resize_ignores_zero_size(self, viewport):
        viewport.resize(0, 0)
        assert viewport.width == 1 and viewport.height == 1
