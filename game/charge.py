"""
蓄力系统 - 按住扳机蓄力，松开放箭
"""
from enum import Enum, auto
from typing import Optional

from .config import BowConfig


class ChargePhase(Enum):
    IDLE = auto()
    CHARGING = auto()


class ChargeController:
    def __init__(self, config: Optional[BowConfig] = None):
        self.config = config or BowConfig()
        self.phase = ChargePhase.IDLE
        self.power = 0.0

    @property
    def is_charging(self) -> bool:
        return self.phase is ChargePhase.CHARGING

    def press(self):
        """开始蓄力（已在蓄力中则忽略）"""
        if self.phase is ChargePhase.IDLE:
            self.phase = ChargePhase.CHARGING

    def tick(self):
        """定时器回调：蓄力中每次增加固定力量，到上限为止"""
        if self.phase is ChargePhase.CHARGING and self.power < self.config.max_power:
            self.power = min(self.power + self.config.charge_step, self.config.max_power)

    def release(self) -> Optional[float]:
        """
        松开扳机

        返回放箭时的力量（清零前的值）；未在蓄力时返回 None。
        状态切换和力量清零在同一步完成。
        """
        if self.phase is not ChargePhase.CHARGING:
            return None
        power = self.power
        self.phase = ChargePhase.IDLE
        self.power = 0.0
        return power
