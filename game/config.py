"""
游戏配置 - 弓箭、手势检测与画面参数
"""
from dataclasses import dataclass

# 手部关键点约定（MediaPipe Hands）
LANDMARK_COUNT = 21
POINTER_LANDMARK = 8     # 食指指尖
REFERENCE_LANDMARK = 4   # 拇指指尖

# 弓箭参数
AIM_SCALE = 10.0          # 归一化坐标 [0,1] -> 世界坐标
GRAVITY_STEP = 0.01       # 每帧速度 y 分量的衰减
PLAY_BOUNDARY = 20.0      # 超出 |x| 或 |y| 的箭被移除
MAX_POWER = 2.0
CHARGE_STEP = 0.1
CHARGE_INTERVAL_MS = 100


@dataclass
class BowConfig:
    """弓箭与物理参数"""
    scale: float = AIM_SCALE
    gravity_step: float = GRAVITY_STEP
    boundary: float = PLAY_BOUNDARY
    max_power: float = MAX_POWER
    charge_step: float = CHARGE_STEP
    charge_interval_ms: int = CHARGE_INTERVAL_MS


@dataclass
class HandConfig:
    """MediaPipe 手势检测参数（只影响检测器内部过滤）"""
    max_num_hands: int = 1
    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class ViewConfig:
    """窗口与透视相机"""
    width: int = 1280
    height: int = 720
    fps: int = 60
    fov: float = 75.0              # 垂直视野（度）
    camera_distance: float = 5.0   # 相机到 z=0 平面的距离
