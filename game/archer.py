"""
瞄准系统 - 根据手部关键点计算弓的位置和朝向
"""
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .config import BowConfig, LANDMARK_COUNT, POINTER_LANDMARK, REFERENCE_LANDMARK


@dataclass(frozen=True)
class AimState:
    """弓的位姿：世界坐标位置 + 旋转角（弧度）"""
    position: Tuple[float, float] = (0.0, 0.0)
    angle: float = 0.0


class AimEstimator:
    def __init__(self, config: Optional[BowConfig] = None):
        self.config = config or BowConfig()
        self.state = AimState()

    def update(self, landmarks) -> AimState:
        """
        用最新一组手部关键点更新瞄准状态

        landmarks: 21 个归一化 (x, y, z) 点，None 表示本帧没有检测到手。
        没有手时保持上一次的状态，避免弓跳回原点。
        """
        if landmarks is None:
            return self.state

        points = np.asarray(landmarks, dtype=float)
        if points.ndim != 2 or points.shape[0] != LANDMARK_COUNT or points.shape[1] < 2:
            raise ValueError(f"手部关键点数量错误: 期望 {LANDMARK_COUNT} 个, 实际 {points.shape}")

        pointer = points[POINTER_LANDMARK]
        reference = points[REFERENCE_LANDMARK]

        # 图像 y 轴向下，世界 y 轴向上
        x = (pointer[0] - 0.5) * self.config.scale
        y = -(pointer[1] - 0.5) * self.config.scale

        # 弓模型的静止姿态朝右，减去四分之一圈对齐
        angle = np.arctan2(reference[1] - pointer[1], reference[0] - pointer[0]) - np.pi / 2

        self.state = AimState(position=(float(x), float(y)), angle=float(angle))
        return self.state
