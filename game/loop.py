"""
帧循环 - 汇合手势、扳机和定时器三路输入，驱动物理并交给渲染器
"""
from typing import Optional

from .archer import AimEstimator
from .charge import ChargeController
from .config import BowConfig
from .physics import LaunchFactory, Projectile, ProjectileSimulator


class FrameLoop:
    """
    每帧按固定顺序执行：读取最新瞄准状态 -> 推进箭的物理 -> 渲染

    三个输入源各自只写自己的状态槽：
      - 手势检测 -> deliver_landmarks()
      - 扳机按键 -> trigger_press() / trigger_release()
      - 蓄力定时器 -> charge_tick()
    """

    def __init__(self, renderer, config: Optional[BowConfig] = None):
        self.config = config or BowConfig()
        self.renderer = renderer
        self.aim = AimEstimator(self.config)
        self.charge = ChargeController(self.config)
        self.simulator = ProjectileSimulator(self.config)
        self._pending_landmarks = None

    def deliver_landmarks(self, landmarks):
        """
        手势检测结果回调（可能比渲染快或慢，只保留最新一份）

        tasks API 下由 MediaPipe 线程调用，只做一次属性赋值。
        """
        self._pending_landmarks = landmarks

    def trigger_press(self):
        self.charge.press()

    def trigger_release(self) -> Optional[Projectile]:
        """松开扳机时放箭，返回新生成的箭"""
        power = self.charge.release()
        if power is None:
            return None

        projectile = LaunchFactory.create(self.aim.state, power)
        self.simulator.launch(projectile)
        print(f"🏹 放箭 | 力量={power:.1f} | 角度={self.aim.state.angle:.2f} rad", flush=True)
        return projectile

    def charge_tick(self):
        self.charge.tick()

    def step(self):
        """执行一帧"""
        landmarks, self._pending_landmarks = self._pending_landmarks, None
        aim = self.aim.update(landmarks)

        self.simulator.step()

        # 弓和搭在弦上的箭使用同一个位姿
        self.renderer.render(aim, aim, self.simulator.snapshot(), self.charge.power)
