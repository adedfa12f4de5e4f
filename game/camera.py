"""
手势输入 - 封装 MediaPipe 手部检测，输出第一只手的 21 个关键点
"""
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np

from .config import HandConfig, LANDMARK_COUNT, REFERENCE_LANDMARK

MODEL_FILENAME = "hand_landmarker.task"


def landmarks_to_array(landmarks) -> np.ndarray:
    """MediaPipe 关键点列表 -> (21, 3) 数组"""
    return np.array([(lm.x, lm.y, lm.z) for lm in landmarks], dtype=float)


class HandLandmarkSource:
    """
    兼容 solutions / tasks 两种 MediaPipe API

    检测结果通过 on_result 回调投递（只看第一只手，没有手时投递 None）。
    solutions API 在 submit() 中同步检测后立即回调；tasks API 以
    LIVE_STREAM 模式异步检测，由 MediaPipe 在自己的线程里回调，
    主循环不等待结果。
    """

    def __init__(self, config: Optional[HandConfig] = None, frame_interval_ms: int = 33,
                 on_result: Optional[Callable[[Optional[np.ndarray]], None]] = None):
        self.config = config or HandConfig()
        self.on_result = on_result
        self.mp_hands: Any = None
        self.hands = None
        self.mode = "none"
        self.frame_interval_ms = frame_interval_ms
        self._video_timestamp_ms = 0
        self._init_hand_tracker()

    @property
    def available(self) -> bool:
        return self.hands is not None

    def _init_hand_tracker(self):
        """初始化 MediaPipe 手势识别，优先使用传统 solutions API。"""
        mp_solutions = getattr(mp, "solutions", None)
        mp_hands_module = getattr(mp_solutions, "hands", None)

        if mp_hands_module is not None:
            self.mp_hands = mp_hands_module
            self.hands = self.mp_hands.Hands(
                static_image_mode=False,
                max_num_hands=self.config.max_num_hands,
                model_complexity=self.config.model_complexity,
                min_detection_confidence=self.config.min_detection_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence,
            )
            self.mode = "solutions"
            print("✅ MediaPipe Hands 初始化成功: solutions API", flush=True)
            return

        try:
            from mediapipe.tasks import python as mp_python
            from mediapipe.tasks.python import vision

            model_candidates = [
                Path(__file__).resolve().parent.parent / MODEL_FILENAME,
                Path.cwd() / MODEL_FILENAME,
            ]
            model_path = next((p for p in model_candidates if p.exists()), None)
            if model_path is None:
                raise FileNotFoundError(f"未找到 {MODEL_FILENAME} 模型文件")

            options = vision.HandLandmarkerOptions(
                base_options=mp_python.BaseOptions(model_asset_path=str(model_path)),
                running_mode=vision.RunningMode.LIVE_STREAM,
                result_callback=self._handle_async_result,
                num_hands=self.config.max_num_hands,
                min_hand_detection_confidence=self.config.min_detection_confidence,
                min_hand_presence_confidence=self.config.min_detection_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence,
            )
            self.hands = vision.HandLandmarker.create_from_options(options)
            self.mode = "tasks"
            print(f"✅ MediaPipe Hands 初始化成功: tasks API ({model_path.name})", flush=True)
        except (ImportError, FileNotFoundError, RuntimeError) as e:
            print(f"⚠️ MediaPipe 手势识别不可用: {e}", flush=True)
            self.hands = None

    def _deliver(self, landmarks):
        if self.on_result is not None:
            self.on_result(None if landmarks is None else landmarks_to_array(landmarks))

    def _handle_async_result(self, result, output_image, timestamp_ms):
        """tasks API 回调（MediaPipe 线程）"""
        self._deliver(result.hand_landmarks[0] if result.hand_landmarks else None)

    def submit(self, frame):
        """提交一帧做检测，结果经 on_result 投递"""
        if frame is None or self.hands is None:
            return

        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

        if self.mode == "solutions":
            results = self.hands.process(frame_rgb)
            hands = results.multi_hand_landmarks
            self._deliver(hands[0].landmark if hands else None)
            return

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        # LIVE_STREAM 要求时间戳严格递增
        self._video_timestamp_ms += self.frame_interval_ms
        self.hands.detect_async(mp_image, self._video_timestamp_ms)

    def close(self):
        if self.hands is not None and hasattr(self.hands, "close"):
            self.hands.close()
        self.hands = None


class MouseLandmarkSource:
    """
    鼠标模式：食指固定在锚点，拇指跟随鼠标

    这样弓固定在画面左下方，朝向跟随鼠标方向。
    """

    def __init__(self, screen_size: Tuple[int, int], anchor: Tuple[float, float] = (0.3, 0.7)):
        self.screen_size = screen_size
        self.anchor = anchor

    def resize(self, width: int, height: int):
        self.screen_size = (width, height)

    def detect(self, mouse_pos: Tuple[int, int]) -> np.ndarray:
        width, height = self.screen_size
        anchor = np.array(self.anchor)
        # 按像素方向换算，保证横竖方向比例一致
        delta = (np.array(mouse_pos, dtype=float) - anchor * (width, height)) / max(width, height)

        points = np.tile(np.append(anchor, 0.0), (LANDMARK_COUNT, 1))
        points[REFERENCE_LANDMARK, :2] = anchor + delta
        return points
