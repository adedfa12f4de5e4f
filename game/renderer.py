"""
渲染器 - 透视相机映射 + pygame 绘制弓、箭和蓄力条
"""
import os
from typing import List, Optional, Tuple

import cv2
import numpy as np
import pygame

from .archer import AimState
from .config import ViewConfig
from .physics import Projectile

WHITE = (255, 255, 255)
BROWN = (139, 69, 19)
GRAY = (74, 74, 74)
RED = (220, 20, 60)
BACKGROUND = (20, 24, 32)

BOW_RADIUS = 1.0
BOW_THICKNESS = 0.1
ARROW_LENGTH = 2.0
ARROW_THICKNESS = 0.05

# 中文字体配置 - 按优先级排列
CHINESE_FONT_PATHS = [
    "/usr/share/fonts/truetype/arphic/ukai.ttc",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/truetype/arphic/uming.ttc",
]
FONT_SIZE = 28


class Viewport:
    """
    透视相机在 z=0 平面上的可见范围

    相机位于 (0, 0, camera_distance) 看向原点；窗口大小变化时
    宽高比随之更新，保持世界坐标到屏幕的映射一致。
    """

    def __init__(self, width: int, height: int, fov: float = 75.0, camera_distance: float = 5.0):
        self.fov = fov
        self.camera_distance = camera_distance
        self.width = width
        self.height = height

    @property
    def aspect(self) -> float:
        return self.width / self.height

    @property
    def half_height(self) -> float:
        return self.camera_distance * np.tan(np.radians(self.fov) / 2)

    @property
    def half_width(self) -> float:
        return self.half_height * self.aspect

    @property
    def pixels_per_unit(self) -> float:
        return self.height / (2 * self.half_height)

    def resize(self, width: int, height: int):
        self.width = max(1, width)
        self.height = max(1, height)

    def to_screen(self, x: float, y: float) -> Tuple[int, int]:
        sx = (x / self.half_width + 1) * self.width / 2
        sy = (1 - y / self.half_height) * self.height / 2
        return int(round(sx)), int(round(sy))


def load_font():
    """尝试加载中文字体，失败时使用默认字体"""
    for font_path in CHINESE_FONT_PATHS:
        if not os.path.exists(font_path):
            continue
        try:
            return pygame.font.Font(font_path, FONT_SIZE)
        except (OSError, pygame.error) as e:
            print(f"   ⚠️ 字体加载失败 {font_path}: {e}", flush=True)
    print("⚠️ 未找到中文字体，使用默认字体", flush=True)
    return pygame.font.Font(None, FONT_SIZE + 8)


def _rotate(points: np.ndarray, angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return points @ np.array([[c, s], [-s, c]])


class PygameRenderer:
    def __init__(self, screen, view: Optional[ViewConfig] = None, max_power: float = 2.0):
        view = view or ViewConfig()
        self.screen = screen
        self.viewport = Viewport(screen.get_width(), screen.get_height(), view.fov, view.camera_distance)
        self.max_power = max_power
        self.font = load_font()
        self.status = ""
        self.preview = None

        # 半圆弓：局部坐标从 0 到 pi 的圆弧
        t = np.linspace(0, np.pi, 32)
        self._bow_shape = np.column_stack([np.cos(t), np.sin(t)]) * BOW_RADIUS

    def resize(self, width: int, height: int):
        """窗口大小变化：更新相机宽高比"""
        self.screen = pygame.display.get_surface() or self.screen
        self.viewport.resize(width, height)

    def set_preview(self, frame):
        """设置摄像头预览帧（BGR），None 表示不显示"""
        if frame is None:
            self.preview = None
            return

        frame = cv2.flip(frame, 1)
        h, w = frame.shape[:2]
        scale = min(240 / w, 180 / h)
        frame_small = cv2.resize(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB), (int(w * scale), int(h * scale)))
        self.preview = pygame.surfarray.make_surface(np.transpose(frame_small, (1, 0, 2)))

    def _width(self, thickness: float) -> int:
        return max(2, int(2 * thickness * self.viewport.pixels_per_unit))

    def _draw_arrow(self, position, orientation: float, color):
        # 圆柱沿局部 y 轴，旋转后与飞行方向一致
        direction = np.array([np.cos(orientation + np.pi / 2), np.sin(orientation + np.pi / 2)])
        half = direction * ARROW_LENGTH / 2
        tail = self.viewport.to_screen(*(np.asarray(position) - half))
        head = self.viewport.to_screen(*(np.asarray(position) + half))
        pygame.draw.line(self.screen, color, tail, head, self._width(ARROW_THICKNESS))

    def _draw_bow(self, bow: AimState):
        points = _rotate(self._bow_shape, bow.angle) + np.asarray(bow.position)
        screen_points = [self.viewport.to_screen(x, y) for x, y in points]
        pygame.draw.lines(self.screen, BROWN, False, screen_points, self._width(BOW_THICKNESS))

    def _draw_hud(self, power: float):
        bar_width, bar_height = 200, 20
        fill = bar_width * min(power / self.max_power, 1.0) if self.max_power > 0 else 0
        pygame.draw.rect(self.screen, WHITE, (20, 20, bar_width, bar_height), 2)
        pygame.draw.rect(self.screen, RED, (20, 20, fill, bar_height))
        text = self.font.render(f"力量: {power:.1f}", True, WHITE)
        self.screen.blit(text, (20, 45))
        if self.status:
            self.screen.blit(self.font.render(self.status, True, WHITE), (20, self.viewport.height - 40))

    def render(self, bow: AimState, nocked: AimState, projectiles: List[Projectile], power: float):
        """绘制一帧"""
        self.screen.fill(BACKGROUND)

        self._draw_bow(bow)
        self._draw_arrow(nocked.position, nocked.angle, GRAY)
        for arrow in projectiles:
            self._draw_arrow(arrow.position, arrow.orientation, GRAY)

        self._draw_hud(power)

        if self.preview is not None:
            x = self.viewport.width - self.preview.get_width() - 20
            self.screen.blit(self.preview, (x, 20))
            pygame.draw.rect(self.screen, WHITE, (x, 20, *self.preview.get_size()), 2)

        pygame.display.flip()
