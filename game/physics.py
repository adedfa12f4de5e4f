"""
物理引擎 - 箭的生成与飞行轨迹
"""
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .archer import AimState
from .config import BowConfig


@dataclass(eq=False)
class Projectile:
    """一支飞行中的箭（速度单位：世界坐标/帧）"""
    position: np.ndarray
    velocity: np.ndarray
    orientation: float
    active: bool = True


class LaunchFactory:
    @staticmethod
    def create(aim: AimState, power: float) -> Projectile:
        """
        按当前瞄准状态和力量生成一支箭

        orientation 已经减去了模型静止姿态的四分之一圈，
        飞行方向要把它加回来，也就是食指指向拇指的原始方向。
        """
        direction = np.array([
            np.cos(aim.angle + np.pi / 2),
            np.sin(aim.angle + np.pi / 2),
        ])
        return Projectile(
            position=np.array(aim.position, dtype=float),
            velocity=direction * power,
            orientation=aim.angle,
        )


class ProjectileSimulator:
    def __init__(self, config: Optional[BowConfig] = None):
        self.config = config or BowConfig()
        self.arrows: List[Projectile] = []  # 所有飞行中的箭

    def launch(self, projectile: Projectile):
        """发射一支箭"""
        self.arrows.append(projectile)

    def step(self):
        """
        推进一帧：先积分位置，再施加重力，最后统一移除出界的箭

        速度以 世界坐标/帧 为单位，帧间隔隐含为 1，不需要传入 dt。
        """
        boundary = self.config.boundary
        for arrow in self.arrows:
            arrow.position += arrow.velocity
            arrow.velocity[1] -= self.config.gravity_step

            if abs(arrow.position[0]) > boundary or abs(arrow.position[1]) > boundary:
                arrow.active = False

        self.arrows = [arrow for arrow in self.arrows if arrow.active]

    def snapshot(self) -> List[Projectile]:
        return list(self.arrows)

    def clear(self):
        """清除所有箭"""
        self.arrows.clear()
