"""
BowDemo: 按键、定时器、窗口事件与摄像头回退（无窗口运行）
"""
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pygame
import pytest

from main import CHARGE_TICK, BowDemo


@pytest.fixture
def demo():
    demo = BowDemo(camera_source="mouse")
    # 关掉真实定时器，只处理测试投递的事件
    pygame.time.set_timer(CHARGE_TICK, 0)
    pygame.event.clear()
    yield demo
    pygame.quit()


def dispatch(demo, *events):
    for event in events:
        pygame.event.post(event)
    for event in pygame.event.get():
        demo.handle_event(event)


def key(event_type, key_code):
    return pygame.event.Event(event_type, key=key_code)


class FakeCamera:
    def __init__(self, active=True, frame_id=1):
        self.active = active
        self.frame_id = frame_id
        self.stopped = False

    def is_active(self):
        return self.active

    def get_latest(self):
        return self.frame_id, np.zeros((24, 32, 3), dtype=np.uint8)

    def stop(self):
        self.stopped = True


class FakeHands:
    def __init__(self):
        self.submitted = 0
        self.closed = False

    def submit(self, frame):
        self.submitted += 1

    def close(self):
        self.closed = True


class TestTrigger:

    def test_hold_space_three_ticks_then_release(self, demo):
        """按住空格 3 次蓄力后松开，发射一支速度 0.3 的箭"""
        dispatch(
            demo,
            key(pygame.KEYDOWN, pygame.K_SPACE),
            key(pygame.KEYDOWN, pygame.K_SPACE),
            pygame.event.Event(CHARGE_TICK),
            pygame.event.Event(CHARGE_TICK),
            pygame.event.Event(CHARGE_TICK),
            key(pygame.KEYUP, pygame.K_SPACE),
        )
        arrows = demo.loop.simulator.snapshot()
        assert len(arrows) == 1
        assert np.linalg.norm(arrows[0].velocity) == pytest.approx(0.3)
        assert demo.loop.charge.power == 0.0

    def test_ticks_without_space_do_nothing(self, demo):
        dispatch(demo, pygame.event.Event(CHARGE_TICK), key(pygame.KEYUP, pygame.K_SPACE))
        assert demo.loop.simulator.snapshot() == []
        assert demo.loop.charge.power == 0.0

    def test_r_clears_arrows(self, demo):
        dispatch(demo, key(pygame.KEYDOWN, pygame.K_SPACE), key(pygame.KEYUP, pygame.K_SPACE))
        assert len(demo.loop.simulator.snapshot()) == 1
        dispatch(demo, key(pygame.KEYDOWN, pygame.K_r))
        assert demo.loop.simulator.snapshot() == []

    def test_escape_stops_running(self, demo):
        demo.running = True
        dispatch(demo, key(pygame.KEYDOWN, pygame.K_ESCAPE))
        assert not demo.running


class TestWindow:

    def test_resize_updates_viewport_aspect(self, demo):
        dispatch(demo, pygame.event.Event(pygame.VIDEORESIZE, w=800, h=800, size=(800, 800)))
        assert demo.renderer.viewport.aspect == pytest.approx(1.0)
        assert demo.mouse.screen_size == (800, 800)

    def test_frame_renders_with_mouse_aim(self, demo):
        demo.poll_landmarks()
        demo.loop.step()
        assert demo.loop.aim.state.position == pytest.approx((-2.0, -2.0))


class TestCameraFeed:

    def test_new_frame_is_submitted_once(self, demo):
        demo.camera, demo.hands = FakeCamera(), FakeHands()
        demo.poll_landmarks()
        demo.poll_landmarks()
        assert demo.hands.submitted == 1

    def test_stalled_camera_falls_back_to_mouse(self, demo):
        camera, hands = FakeCamera(active=False), FakeHands()
        demo.camera, demo.hands = camera, hands
        demo.poll_landmarks()
        assert camera.stopped and hands.closed
        assert demo.camera is None and demo.hands is None
        assert "鼠标" in demo.renderer.status
